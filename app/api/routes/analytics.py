"""
Employer analytics endpoints.

Basic analytics on Starter and up; the monthly usage breakdown needs
advanced analytics (Professional and Enterprise).
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.db.session import get_db
from app.db.models.company import Company
from app.db.models.job_posting import JobPosting
from app.db.models.usage import UsageEvent
from app.core.quota_guard import require_analytics
from app.core.subscription_plans import analytics_level
from app.schemas.job import JobAnalyticsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies/{company_id}/analytics", tags=["Analytics"])


def _count(db: Session, company_id: int, *criteria) -> int:
    return db.query(func.count(JobPosting.id)).filter(
        JobPosting.company_id == company_id, *criteria
    ).scalar() or 0


@router.get("", status_code=status.HTTP_200_OK, response_model=JobAnalyticsResponse)
def get_analytics(
    company: Company = Depends(require_analytics),
    db: Session = Depends(get_db)
):
    """Job posting statistics for the company."""
    level = analytics_level(company.subscription_plan)

    monthly_usage = None
    if level == "advanced":
        rows = db.query(
            UsageEvent.month_key,
            UsageEvent.resource,
            func.sum(UsageEvent.amount)
        ).filter(
            UsageEvent.company_id == company.id
        ).group_by(UsageEvent.month_key, UsageEvent.resource).all()

        monthly_usage = {}
        for month_key, resource, total in rows:
            monthly_usage.setdefault(month_key, {})[resource] = int(total)

    logger.debug(f"Analytics requested: company_id={company.id}, level={level}")

    return JobAnalyticsResponse(
        company_id=company.id,
        analytics_level=level,
        total_jobs=_count(db, company.id),
        active_jobs=_count(db, company.id, JobPosting.is_active.is_(True)),
        featured_jobs=_count(db, company.id, JobPosting.is_featured.is_(True)),
        urgent_jobs=_count(db, company.id, JobPosting.is_urgent.is_(True)),
        monthly_usage=monthly_usage
    )
