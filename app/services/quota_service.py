"""
Quota service for enforcing plan limits on employer actions.

Handles plan lookup, monthly usage aggregation, and atomic
check-and-record of quota-limited actions.
"""
import logging
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from sqlalchemy import func, and_

from app.core.logging_config import QUOTA_AUDIT_LOGGER
from app.db.models.company import Company
from app.db.models.usage import UsageEvent
from app.core.subscription_plans import (
    AdmissionResult,
    QuotaResource,
    SubscriptionPlan,
    UsageCounts,
    InvalidPlanError,
    check_admission,
    get_quota_display,
    get_quota_info,
    normalize_plan,
)

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger(QUOTA_AUDIT_LOGGER)


class CompanyNotFoundError(LookupError):
    """Raised when a company ID does not exist."""


def get_company(db: Session, company_id: int, lock: bool = False) -> Company:
    """
    Fetch a company, optionally locking its row for the rest of the transaction.

    A locked fetch reloads the row into the session, so an instance loaded
    earlier in the request reflects the locked state afterwards.

    Raises:
        CompanyNotFoundError: If the company does not exist
    """
    query = db.query(Company).filter(Company.id == company_id)
    if lock:
        query = query.with_for_update().populate_existing()
    company = query.first()
    if not company:
        raise CompanyNotFoundError(f"Company {company_id} not found")
    return company


def plan_of(company: Company) -> SubscriptionPlan:
    """
    Get the subscription plan stored on a company.

    Raises:
        InvalidPlanError: If the stored plan is not a known plan
    """
    try:
        return normalize_plan(company.subscription_plan)
    except InvalidPlanError:
        logger.error(
            f"Company has an unknown subscription plan: company_id={company.id}, "
            f"plan={company.subscription_plan!r}"
        )
        raise


def get_plan_for_company(db: Session, company_id: int) -> SubscriptionPlan:
    """
    Get a company's subscription plan.

    Args:
        db: Database session
        company_id: Company ID

    Returns:
        SubscriptionPlan of the company
    """
    return plan_of(get_company(db, company_id))


def get_month_usage(db: Session, company_id: int, month_key: str) -> UsageCounts:
    """
    Get per-resource usage totals for a company in a given month.

    Args:
        db: Database session
        company_id: Company ID
        month_key: Month key in "YYYY-MM" format

    Returns:
        UsageCounts, with 0 for resources without usage
    """
    usage_query = db.query(
        UsageEvent.resource,
        func.sum(UsageEvent.amount).label('total')
    ).filter(
        and_(
            UsageEvent.company_id == company_id,
            UsageEvent.month_key == month_key
        )
    ).group_by(UsageEvent.resource).all()

    known = {resource.value for resource in QuotaResource}
    totals = {resource: int(total) for resource, total in usage_query if resource in known}
    return UsageCounts(**totals)


def check_and_consume(
    db: Session,
    company_id: int,
    *resources: QuotaResource,
    reference_id: Optional[int] = None,
    commit: bool = True,
) -> AdmissionResult:
    """
    Check quota for one or more resources and record usage if all are allowed.

    This function:
    1. Locks the company row so concurrent requests serialize
    2. Gets current month usage
    3. Runs the admission check for every requested resource
    4. Records one usage event per resource if every check passed

    Args:
        db: Database session
        company_id: Company ID
        resources: Resources the action consumes
        reference_id: Job posting or candidate the usage is spent on
        commit: Commit on success. With commit=False the caller owns the
            transaction and must commit or roll back

    Returns:
        AdmissionResult of the first denied resource, or an allowed result.
        On denial no usage is recorded.
    """
    company = get_company(db, company_id, lock=True)
    plan = plan_of(company)
    month_key = UsageEvent.get_month_key()
    usage = get_month_usage(db, company_id, month_key)

    for resource in resources:
        resource = QuotaResource(resource)
        result = check_admission(plan, resource, usage.get(resource))
        if not result.allowed:
            audit_logger.warning(
                f"Quota denied: company_id={company_id}, resource={resource.value}, "
                f"plan={plan.value}, used={result.current}, limit={result.limit}, code={result.code}"
            )
            if commit:
                db.rollback()
            return result

    for resource in resources:
        db.add(UsageEvent(
            company_id=company_id,
            resource=QuotaResource(resource).value,
            amount=1,
            reference_id=reference_id,
            month_key=month_key,
        ))

    if commit:
        db.commit()
    else:
        db.flush()

    audit_logger.info(
        f"Usage consumed: company_id={company_id}, "
        f"resources={[QuotaResource(r).value for r in resources]}, plan={plan.value}"
    )

    return AdmissionResult(allowed=True)


def get_quota_for_response(db: Session, company_id: int) -> Dict[str, Any]:
    """
    Get quota data formatted for GET /companies/{id}/quota.

    Returns:
        Dictionary with plan, month_key, quota_reset_date, display string,
        per-resource details and plan features
    """
    plan = get_plan_for_company(db, company_id)
    month_key = UsageEvent.get_month_key()
    usage = get_month_usage(db, company_id, month_key)

    info = get_quota_info(plan, usage)
    info.update({
        "company_id": company_id,
        "month_key": month_key,
        "quota_reset_date": UsageEvent.get_reset_date().isoformat(),
        "display": get_quota_display(plan, usage),
    })
    return info


def change_plan(db: Session, company_id: int, plan: Any) -> Company:
    """
    Move a company to another subscription plan.

    Usage already recorded in the current month keeps counting against the
    new plan's quotas.

    Raises:
        CompanyNotFoundError: If the company does not exist
        InvalidPlanError: If the plan is not a known plan
    """
    new_plan = normalize_plan(plan)
    company = get_company(db, company_id, lock=True)
    old_plan = company.subscription_plan

    company.subscription_plan = new_plan.value
    db.commit()
    db.refresh(company)

    audit_logger.info(f"Plan changed: company_id={company_id}, from={old_plan}, to={new_plan.value}")
    return company
