"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.
"""
from app.db.models.company import Company
from app.db.models.job_posting import JobPosting
from app.db.models.usage import UsageEvent

__all__ = [
    "Company",
    "JobPosting",
    "UsageEvent",
]
