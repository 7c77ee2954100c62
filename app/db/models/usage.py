from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from datetime import date, datetime
from app.db.base import Base


class UsageEvent(Base):
    """
    Usage event model for tracking quota-limited employer actions.

    Tracks per-company, per-resource usage with month_key for fast monthly aggregation.
    """
    __tablename__ = "usage_events"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    resource = Column(String, nullable=False, index=True)  # "job_posting", "featured", "urgent", "cv_download"
    amount = Column(Integer, default=1, nullable=False)
    reference_id = Column(Integer, nullable=True)  # job posting or candidate the usage was spent on
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    month_key = Column(String(7), nullable=False, index=True)  # "YYYY-MM" format for fast monthly queries

    # Composite index for fast monthly aggregation queries
    __table_args__ = (
        Index('idx_company_resource_month', 'company_id', 'resource', 'month_key'),
    )

    @staticmethod
    def get_month_key(when: datetime = None) -> str:
        """Generate month_key string in YYYY-MM format."""
        if when is None:
            when = datetime.utcnow()
        return when.strftime("%Y-%m")

    @staticmethod
    def get_reset_date(when: datetime = None) -> date:
        """First day of the month after `when`, when quotas start over."""
        if when is None:
            when = datetime.utcnow()
        if when.month == 12:
            return date(when.year + 1, 1, 1)
        return date(when.year, when.month + 1, 1)
