"""
Job posting endpoints for employers.

Creating a posting consumes job posting quota; featured and urgent
listings consume their own quotas.
"""
import logging
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy import and_

from app.db.session import get_db
from app.db.models.company import Company
from app.db.models.job_posting import JobPosting
from app.core.quota_guard import enforce_quota, get_company_or_404
from app.core.subscription_plans import QuotaResource, InvalidPlanError, get_plan_config
from app.services.quota_service import get_company
from app.schemas.job import (
    JobPostingCreate,
    JobPostingResponse,
    JobPostingListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies/{company_id}/jobs", tags=["Jobs"])


def get_job_for_company(db: Session, company_id: int, job_id: int, lock: bool = False) -> JobPosting:
    """Fetch a job posting owned by the company, or raise 404."""
    query = db.query(JobPosting).filter(
        and_(
            JobPosting.id == job_id,
            JobPosting.company_id == company_id
        )
    )
    if lock:
        query = query.with_for_update().populate_existing()
    job = query.first()
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Job posting not found"
        )
    return job


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobPostingResponse)
def create_job_posting(
    job_data: JobPostingCreate,
    company: Company = Depends(get_company_or_404),
    db: Session = Depends(get_db)
):
    """
    Publish a new job posting.

    Uses one job posting credit, plus one featured and/or urgent credit when
    the posting is flagged. Returns 402 with an upgrade suggestion when any
    of them is not available.
    """
    resources = [QuotaResource.JOB_POSTING]
    if job_data.is_featured:
        resources.append(QuotaResource.FEATURED)
    if job_data.is_urgent:
        resources.append(QuotaResource.URGENT)

    try:
        # Lock the company first so quota reads and the insert are serialized
        locked = get_company(db, company.id, lock=True)
        job_duration = get_plan_config(locked.subscription_plan).job_duration

        job = JobPosting(
            company_id=company.id,
            title=job_data.title,
            location=job_data.location,
            job_type=job_data.job_type,
            description=job_data.description,
            is_featured=job_data.is_featured,
            is_urgent=job_data.is_urgent,
            expires_at=datetime.utcnow() + timedelta(days=job_duration),
        )
        db.add(job)
        db.flush()

        enforce_quota(db, company, *resources, reference_id=job.id)

        db.commit()
        db.refresh(job)

        logger.info(
            f"Job posting created: job_id={job.id}, company_id={company.id}, "
            f"featured={job.is_featured}, urgent={job.is_urgent}"
        )

        return JobPostingResponse.model_validate(job)

    except HTTPException:
        raise
    except InvalidPlanError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Company has an invalid subscription plan"
        )
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create job posting: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create job posting"
        )


@router.get("", status_code=status.HTTP_200_OK, response_model=JobPostingListResponse)
def list_job_postings(
    active_only: bool = Query(False, description="Only list active postings"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    company: Company = Depends(get_company_or_404),
    db: Session = Depends(get_db)
):
    """List the company's job postings, newest first."""
    query = db.query(JobPosting).filter(JobPosting.company_id == company.id)
    if active_only:
        query = query.filter(JobPosting.is_active.is_(True))

    total = query.count()
    offset = (page - 1) * page_size
    jobs = query.order_by(JobPosting.created_at.desc(), JobPosting.id.desc()).offset(offset).limit(page_size).all()

    logger.debug(f"Job postings listed: company_id={company.id}, total={total}, page={page}")

    return JobPostingListResponse(
        jobs=[JobPostingResponse.model_validate(job) for job in jobs],
        total=total,
        page=page,
        page_size=page_size
    )


def _mark_listing(db: Session, company: Company, job_id: int, resource: QuotaResource) -> JobPosting:
    attribute = "is_featured" if resource is QuotaResource.FEATURED else "is_urgent"

    # Company lock first, same order as create_job_posting; the flag is read from the locked row
    get_company(db, company.id, lock=True)
    job = get_job_for_company(db, company.id, job_id, lock=True)

    if getattr(job, attribute):
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Job posting is already {resource.value}"
        )

    enforce_quota(db, company, resource, reference_id=job.id)

    setattr(job, attribute, True)
    db.commit()
    db.refresh(job)

    logger.info(f"Job posting marked {resource.value}: job_id={job.id}, company_id={company.id}")
    return job


@router.post("/{job_id}/featured", status_code=status.HTTP_200_OK, response_model=JobPostingResponse)
def mark_featured(
    job_id: int,
    company: Company = Depends(get_company_or_404),
    db: Session = Depends(get_db)
):
    """Promote an existing posting to a featured listing (uses featured quota)."""
    return JobPostingResponse.model_validate(
        _mark_listing(db, company, job_id, QuotaResource.FEATURED)
    )


@router.post("/{job_id}/urgent", status_code=status.HTTP_200_OK, response_model=JobPostingResponse)
def mark_urgent(
    job_id: int,
    company: Company = Depends(get_company_or_404),
    db: Session = Depends(get_db)
):
    """Flag an existing posting as urgent hiring (uses urgent quota)."""
    return JobPostingResponse.model_validate(
        _mark_listing(db, company, job_id, QuotaResource.URGENT)
    )
