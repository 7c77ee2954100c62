"""
JobPosting model for job listings published by employers.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.db.base import Base


class JobPosting(Base):
    """
    JobPosting model for a job listing owned by a company.

    Featured and urgent flags are quota-limited per plan.
    """
    __tablename__ = "job_postings"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)

    # Job posting details
    title = Column(String, nullable=False, index=True)
    location = Column(String, nullable=False)
    job_type = Column(String, nullable=False, default="full-time")  # full-time | part-time | contract | freelance
    description = Column(Text, nullable=False)

    # Listing flags
    is_featured = Column(Boolean, default=False, nullable=False)
    is_urgent = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    company = relationship("Company", backref="job_postings")

    # Indexes
    __table_args__ = (
        Index('idx_company_created', 'company_id', 'created_at'),
    )

    def __repr__(self):
        return f"<JobPosting(id={self.id}, company_id={self.company_id}, title='{self.title}')>"
