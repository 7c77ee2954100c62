"""
Quota enforcement for employer actions.

This module translates quota decisions into HTTP responses:
1. Resolves the acting company (404 if missing)
2. Checks current month usage against plan limits
3. Records usage if allowed
4. Raises HTTPException 402 with a structured paywall payload if denied
"""
import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.db.models.company import Company
from app.core.config import FRONTEND_URL
from app.core.subscription_plans import (
    AdmissionResult,
    QuotaResource,
    InvalidPlanError,
    check_analytics_access,
    check_cv_database_access,
)
from app.services.quota_service import (
    CompanyNotFoundError,
    check_and_consume,
    get_company,
    plan_of,
)

logger = logging.getLogger(__name__)


def get_company_or_404(company_id: int, db: Session = Depends(get_db)) -> Company:
    """Fetch the company addressed by the request path."""
    try:
        return get_company(db, company_id)
    except CompanyNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company not found"
        )


def paywall_detail(result: AdmissionResult, plan: str) -> dict:
    """Build the 402 response payload for a denied admission."""
    return {
        "detail": result.reason,
        "code": "PAYWALL",
        "reason_code": result.code,
        "resource": result.resource,
        "plan": plan,
        "limit": result.limit,
        "used": result.current,
        "upgrade_url": f"{FRONTEND_URL}/pricing",
    }


def enforce_quota(
    db: Session,
    company: Company,
    *resources: QuotaResource,
    reference_id: Optional[int] = None,
) -> None:
    """
    Consume quota for an action inside the caller's transaction.

    On success usage is flushed but not committed; the route commits it
    together with the action itself. On denial the transaction is rolled
    back and HTTPException 402 is raised.

    Raises:
        HTTPException 402: Quota exhausted or feature not in plan
        HTTPException 500: Company has an invalid plan stored
    """
    try:
        result = check_and_consume(
            db, company.id, *resources, reference_id=reference_id, commit=False
        )
    except InvalidPlanError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Company has an invalid subscription plan"
        )

    if result.allowed:
        return

    # Row as reloaded under the lock; read before rollback expires it
    plan = db.get(Company, company.id).subscription_plan
    db.rollback()
    raise HTTPException(
        status_code=status.HTTP_402_PAYMENT_REQUIRED,
        detail=paywall_detail(result, plan)
    )


def _require_feature(check, feature: str):
    def checker(company: Company = Depends(get_company_or_404)) -> Company:
        try:
            result = check(plan_of(company))
        except InvalidPlanError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Company has an invalid subscription plan"
            )

        if not result.allowed:
            logger.warning(
                f"Feature access denied: company_id={company.id}, "
                f"plan={company.subscription_plan}, feature={feature}"
            )
            raise HTTPException(
                status_code=status.HTTP_402_PAYMENT_REQUIRED,
                detail=paywall_detail(result, company.subscription_plan)
            )
        return company

    return checker


# Dependencies for plan capabilities that are not counted
require_analytics = _require_feature(check_analytics_access, "analytics")
require_cv_database = _require_feature(check_cv_database_access, "cv_database")
