"""
Tests for overlapping requests on the same company.

Two sessions on a file-backed SQLite database stand in for two requests:
one request loads its rows, the other commits a change, then the first
continues. Locked reads must see the committed state, not the copy the
first session loaded earlier.
"""
import pytest
from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.db.base import Base
from app.db.models.company import Company
from app.db.models.job_posting import JobPosting
from app.db.models.usage import UsageEvent
from app.api.routes.jobs import _mark_listing, get_job_for_company
from app.core.quota_guard import enforce_quota
from app.core.subscription_plans import QuotaResource
from app.services.quota_service import (
    change_plan,
    check_and_consume,
    get_company,
    get_month_usage,
)


@pytest.fixture
def session_factory(tmp_path):
    """Create a file-backed database so each session gets its own connection."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'quota.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def sessions(session_factory):
    """Provide two independent sessions, one per request."""
    first, second = session_factory(), session_factory()
    try:
        yield first, second
    finally:
        first.close()
        second.close()


def make_company(db, plan: str, **usage) -> int:
    company = Company(name=f"PT {plan.title()}", subscription_plan=plan)
    db.add(company)
    db.commit()
    for resource, amount in usage.items():
        db.add(UsageEvent(
            company_id=company.id,
            resource=resource,
            amount=amount,
            month_key=UsageEvent.get_month_key(),
        ))
    db.commit()
    return company.id


def make_job(db, company_id: int) -> int:
    job = JobPosting(
        company_id=company_id,
        title="Kasir",
        location="Depok",
        description="Melayani transaksi pelanggan.",
    )
    db.add(job)
    db.commit()
    return job.id


def test_last_credit_is_granted_once(sessions):
    """Test two requests at quota - 1 cannot both consume."""
    request_a, request_b = sessions
    company_id = make_company(request_a, "free", job_posting=2)

    # Request B has the company loaded before A consumes the last credit
    get_company(request_b, company_id)

    assert check_and_consume(request_a, company_id, QuotaResource.JOB_POSTING).allowed is True

    result = check_and_consume(request_b, company_id, QuotaResource.JOB_POSTING)
    assert result.allowed is False
    assert result.current == 3
    assert result.limit == 3

    usage = get_month_usage(request_a, company_id, UsageEvent.get_month_key())
    assert usage.job_posting == 3


def test_check_and_consume_uses_plan_committed_by_other_request(sessions):
    """Test the plan is read from the locked row, not from an earlier load."""
    request_a, request_b = sessions
    company_id = make_company(request_a, "free", job_posting=3)

    stale = get_company(request_b, company_id)
    assert stale.subscription_plan == "free"

    change_plan(request_a, company_id, "starter")

    result = check_and_consume(request_b, company_id, QuotaResource.JOB_POSTING)
    assert result.allowed is True
    assert stale.subscription_plan == "starter"


def test_paywall_reports_plan_committed_by_other_request(sessions):
    """Test the 402 payload names the plan in force when the quota was checked."""
    request_a, request_b = sessions
    company_id = make_company(request_a, "starter", job_posting=10, featured=3)

    company = get_company(request_b, company_id)
    assert company.subscription_plan == "starter"

    change_plan(request_a, company_id, "free")

    with pytest.raises(HTTPException) as exc_info:
        enforce_quota(request_b, company, QuotaResource.FEATURED)

    assert exc_info.value.status_code == 402
    assert exc_info.value.detail["plan"] == "free"
    assert exc_info.value.detail["reason_code"] == "feature_unavailable"


def test_mark_featured_overlapping_requests_consume_once(sessions):
    """Test a posting featured by one request is a 409 for the other."""
    request_a, request_b = sessions
    company_id = make_company(request_a, "starter")
    job_id = make_job(request_a, company_id)

    # Request B has the posting loaded as not featured
    company_b = get_company(request_b, company_id)
    assert get_job_for_company(request_b, company_id, job_id).is_featured is False

    company_a = get_company(request_a, company_id)
    job = _mark_listing(request_a, company_a, job_id, QuotaResource.FEATURED)
    assert job.is_featured is True

    with pytest.raises(HTTPException) as exc_info:
        _mark_listing(request_b, company_b, job_id, QuotaResource.FEATURED)
    assert exc_info.value.status_code == 409

    usage = get_month_usage(request_a, company_id, UsageEvent.get_month_key())
    assert usage.featured == 1


def test_mark_urgent_overlapping_requests_consume_once(sessions):
    """Test urgent marking is consumed once across overlapping requests."""
    request_a, request_b = sessions
    company_id = make_company(request_a, "professional")
    job_id = make_job(request_a, company_id)

    company_b = get_company(request_b, company_id)
    get_job_for_company(request_b, company_id, job_id)

    _mark_listing(request_a, get_company(request_a, company_id), job_id, QuotaResource.URGENT)

    with pytest.raises(HTTPException) as exc_info:
        _mark_listing(request_b, company_b, job_id, QuotaResource.URGENT)
    assert exc_info.value.status_code == 409

    usage = get_month_usage(request_a, company_id, UsageEvent.get_month_key())
    assert usage.urgent == 1
