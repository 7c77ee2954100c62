"""
Pydantic schemas for job posting endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class JobPostingCreate(BaseModel):
    """Schema for creating a new job posting."""
    title: str = Field(..., description="Job title", min_length=1, max_length=255)
    location: str = Field(..., description="Job location", min_length=1, max_length=255)
    job_type: str = Field(
        default="full-time",
        description="Employment type",
        pattern="^(full-time|part-time|contract|freelance)$"
    )
    description: str = Field(..., description="Job description", min_length=1)
    is_featured: bool = Field(False, description="Publish as featured listing (uses featured quota)")
    is_urgent: bool = Field(False, description="Publish as urgent listing (uses urgent quota)")


class JobPostingResponse(BaseModel):
    """Schema for job posting response."""
    id: int = Field(..., description="Job posting ID")
    company_id: int = Field(..., description="Company that owns this posting")
    title: str
    location: str
    job_type: str
    description: str
    is_featured: bool
    is_urgent: bool
    is_active: bool
    expires_at: Optional[datetime] = Field(None, description="When the posting stops being listed")
    created_at: datetime = Field(..., description="Job posting creation timestamp")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "company_id": 1,
                "title": "Backend Engineer",
                "location": "Jakarta",
                "job_type": "full-time",
                "description": "Build and run our hiring platform APIs.",
                "is_featured": True,
                "is_urgent": False,
                "is_active": True,
                "expires_at": "2026-11-18T09:00:00Z",
                "created_at": "2026-10-19T09:00:00Z"
            }
        }


class JobPostingListResponse(BaseModel):
    """Schema for list of job postings response."""
    jobs: list[JobPostingResponse] = Field(..., description="List of job postings")
    total: int = Field(..., description="Total number of job postings")
    page: int = Field(1, description="Current page number")
    page_size: int = Field(20, description="Number of items per page")


class CVDownloadRequest(BaseModel):
    candidate_id: int = Field(..., ge=1, description="Candidate whose CV is downloaded")


class CVDownloadResponse(BaseModel):
    company_id: int
    candidate_id: int
    quota: str = Field(..., description="Quota summary after the download")


class JobAnalyticsResponse(BaseModel):
    """Job posting statistics; monthly breakdown requires advanced analytics."""
    company_id: int
    analytics_level: str = Field(..., description="basic or advanced")
    total_jobs: int
    active_jobs: int
    featured_jobs: int
    urgent_jobs: int
    monthly_usage: Optional[dict] = Field(
        None, description="Usage per month and resource (advanced analytics only)"
    )


class CVDownloadHistoryResponse(BaseModel):
    company_id: int
    month_key: str = Field(..., description="Accounting month in YYYY-MM format")
    candidate_ids: list[int] = Field(..., description="Downloaded candidates, oldest first")
