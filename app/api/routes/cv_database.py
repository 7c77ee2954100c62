"""
CV database endpoints.

Downloading a candidate CV requires the CV database capability and
consumes CV download quota.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import and_

from app.db.session import get_db
from app.db.models.company import Company
from app.db.models.usage import UsageEvent
from app.core.quota_guard import enforce_quota, get_company_or_404, require_cv_database
from app.core.subscription_plans import QuotaResource, get_quota_display
from app.services.quota_service import get_month_usage, plan_of
from app.schemas.job import CVDownloadRequest, CVDownloadResponse, CVDownloadHistoryResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies/{company_id}/cv-downloads", tags=["CV Database"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CVDownloadResponse)
def download_cv(
    request: CVDownloadRequest,
    company: Company = Depends(get_company_or_404),
    db: Session = Depends(get_db)
):
    """
    Record a CV download for a candidate.

    Returns 402 when the plan has no CV database or the monthly download
    quota is used up.
    """
    enforce_quota(db, company, QuotaResource.CV_DOWNLOAD, reference_id=request.candidate_id)
    db.commit()

    usage = get_month_usage(db, company.id, UsageEvent.get_month_key())
    quota = get_quota_display(plan_of(company), usage)

    logger.info(
        f"CV downloaded: company_id={company.id}, candidate_id={request.candidate_id}, quota='{quota}'"
    )

    return CVDownloadResponse(
        company_id=company.id,
        candidate_id=request.candidate_id,
        quota=quota
    )


@router.get("", status_code=status.HTTP_200_OK, response_model=CVDownloadHistoryResponse)
def list_cv_downloads(
    company: Company = Depends(require_cv_database),
    db: Session = Depends(get_db)
):
    """List the candidates whose CV the company downloaded this month."""
    month_key = UsageEvent.get_month_key()
    events = db.query(UsageEvent).filter(
        and_(
            UsageEvent.company_id == company.id,
            UsageEvent.resource == QuotaResource.CV_DOWNLOAD.value,
            UsageEvent.month_key == month_key
        )
    ).order_by(UsageEvent.id).all()

    return CVDownloadHistoryResponse(
        company_id=company.id,
        month_key=month_key,
        candidate_ids=[event.reference_id for event in events]
    )
