"""
Pydantic schemas for company endpoints.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class CompanyCreate(BaseModel):
    """Schema for registering an employer account."""
    name: str = Field(..., description="Company name", min_length=1, max_length=255)
    subscription_plan: str = Field(
        default="free",
        description="Subscription plan",
        pattern="^(free|starter|professional|enterprise)$"
    )


class CompanyResponse(BaseModel):
    id: int = Field(..., description="Company ID")
    name: str = Field(..., description="Company name")
    subscription_plan: str = Field(..., description="Subscription plan")
    created_at: Optional[datetime] = Field(None, description="Registration timestamp")

    class Config:
        from_attributes = True
