"""
Company endpoints.

Registers employer accounts and reports their quota usage.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.db.models.company import Company
from app.core.quota_guard import get_company_or_404
from app.core.subscription_plans import InvalidPlanError
from app.schemas.company import CompanyCreate, CompanyResponse
from app.schemas.quota import QuotaResponse
from app.services.quota_service import get_quota_for_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CompanyResponse)
def create_company(
    company_data: CompanyCreate,
    db: Session = Depends(get_db)
):
    """Register a company on the given plan (free by default)."""
    try:
        company = Company(
            name=company_data.name,
            subscription_plan=company_data.subscription_plan
        )
        db.add(company)
        db.commit()
        db.refresh(company)

        logger.info(f"Company created: company_id={company.id}, plan={company.subscription_plan}")

        return CompanyResponse.model_validate(company)

    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create company: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create company"
        )


@router.get("/{company_id}/quota", status_code=status.HTTP_200_OK, response_model=QuotaResponse)
def get_quota(
    company: Company = Depends(get_company_or_404),
    db: Session = Depends(get_db)
):
    """
    Get current month quota usage for a company.

    Returns:
    - plan and accounting month
    - quota_reset_date: when the counters start over
    - display: summary such as "Job: 2 / 10, Featured: 1 / 3"
    - resources: limit, usage and remaining per resource
    - features: analytics, CV database and badge capabilities
    """
    try:
        quota = get_quota_for_response(db, company.id)
    except InvalidPlanError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Company has an invalid subscription plan"
        )

    logger.debug(f"Quota summary requested: company_id={company.id}, plan={quota['plan']}")

    return quota
