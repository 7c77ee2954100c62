"""
Pydantic schemas for plan endpoints.
"""
from typing import Optional, List
from pydantic import BaseModel, Field

from app.core.subscription_plans import PlanFeatures


class PlanBadgeResponse(BaseModel):
    color: str = Field(..., description="CSS classes of the plan badge")
    icon: str = Field(..., description="Badge icon")


class PlanResponse(BaseModel):
    """Feature set of one subscription plan."""
    name: str = Field(..., description="Plan key (free, starter, professional, enterprise)")
    display_name: str = Field(..., description="Plan name shown on the pricing page")
    tagline: str
    badge: PlanBadgeResponse
    tags: List[str] = Field(default_factory=list)
    job_posting_quota: Optional[int] = Field(None, description="Job postings per month (None for unlimited)")
    featured_quota: Optional[int] = Field(None, description="Featured listings per month (None for unlimited)")
    urgent_quota: Optional[int] = Field(None, description="Urgent listings per month (None for unlimited)")
    job_duration: int = Field(..., description="Days a job posting stays active")
    has_verified_badge: bool
    has_basic_analytics: bool
    has_advanced_analytics: bool
    has_cv_database: bool
    cv_download_quota: Optional[int] = Field(None, description="CV downloads per month (None for unlimited)")
    support_level: str

    @classmethod
    def from_features(cls, features: PlanFeatures) -> "PlanResponse":
        return cls(
            name=features.name,
            display_name=features.display_name,
            tagline=features.tagline,
            badge=PlanBadgeResponse(color=features.badge.color, icon=features.badge.icon),
            tags=list(features.tags),
            job_posting_quota=features.job_posting_quota,
            featured_quota=features.featured_quota,
            urgent_quota=features.urgent_quota,
            job_duration=features.job_duration,
            has_verified_badge=features.has_verified_badge,
            has_basic_analytics=features.has_basic_analytics,
            has_advanced_analytics=features.has_advanced_analytics,
            has_cv_database=features.has_cv_database,
            cv_download_quota=features.cv_download_quota,
            support_level=features.support_level.value,
        )


class PlanListResponse(BaseModel):
    plans: List[PlanResponse] = Field(..., description="All plans, cheapest first")
