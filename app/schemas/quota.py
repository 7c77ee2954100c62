"""
Pydantic schemas for quota endpoints.
"""
from typing import Optional, Dict
from pydantic import BaseModel, Field


class ResourceQuotaDetail(BaseModel):
    """Usage details for a single quota-limited resource."""
    current: int = Field(..., description="Current month usage")
    limit: Optional[int] = Field(None, description="Monthly limit (None for unlimited)")
    remaining: Optional[int] = Field(None, description="Remaining quota (None for unlimited)")
    unlimited: bool = Field(..., description="Whether this resource has unlimited quota")
    available: bool = Field(..., description="Whether the plan includes this resource at all")
    percentage: int = Field(..., description="Share of the quota used (0 for unlimited)")


class QuotaFeatures(BaseModel):
    """Plan capabilities that are not counted."""
    has_basic_analytics: bool
    has_advanced_analytics: bool
    analytics_level: str = Field(..., description="none, basic or advanced")
    has_cv_database: bool
    has_verified_badge: bool
    job_duration: int = Field(..., description="Days a job posting stays active")
    support_level: str


class QuotaResponse(BaseModel):
    """Response schema for GET /companies/{company_id}/quota."""
    company_id: int
    plan: str = Field(..., description="Current plan (free, starter, professional, enterprise)")
    month_key: str = Field(..., description="Current accounting month in YYYY-MM format")
    quota_reset_date: str = Field(..., description="Date the quotas start over (ISO format)")
    display: str = Field(..., description="Human-readable quota summary")
    resources: Dict[str, ResourceQuotaDetail] = Field(..., description="Per-resource usage details")
    features: QuotaFeatures

    class Config:
        json_schema_extra = {
            "example": {
                "company_id": 1,
                "plan": "starter",
                "month_key": "2026-10",
                "quota_reset_date": "2026-11-01",
                "display": "Job: 2 / 10, Featured: 1 / 3",
                "resources": {
                    "job_posting": {
                        "current": 2,
                        "limit": 10,
                        "remaining": 8,
                        "unlimited": False,
                        "available": True,
                        "percentage": 20
                    }
                },
                "features": {
                    "has_basic_analytics": True,
                    "has_advanced_analytics": False,
                    "analytics_level": "basic",
                    "has_cv_database": False,
                    "has_verified_badge": True,
                    "job_duration": 30,
                    "support_level": "standard"
                }
            }
        }


class QuotaExceededResponse(BaseModel):
    """Error detail returned with HTTP 402 when an action is denied."""
    detail: str = Field(..., description="Human-readable reason, including upgrade suggestion")
    code: str = Field("PAYWALL", description="Error code")
    reason_code: str = Field(..., description="feature_unavailable or quota_exhausted")
    resource: Optional[str] = Field(None, description="Resource that was denied")
    plan: str = Field(..., description="Company's current plan")
    limit: Optional[int] = Field(None, description="Monthly limit for this resource")
    used: Optional[int] = Field(None, description="Current month usage")
    upgrade_url: str = Field(..., description="Pricing page URL")

    class Config:
        json_schema_extra = {
            "example": {
                "detail": "Quota habis! Upgrade ke Starter (Rp 199k)",
                "code": "PAYWALL",
                "reason_code": "quota_exhausted",
                "resource": "job_posting",
                "plan": "free",
                "limit": 3,
                "used": 3,
                "upgrade_url": "http://localhost:5000/pricing"
            }
        }
