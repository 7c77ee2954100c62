from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from app.db.base import Base


class Company(Base):
    """Employer account. The subscription plan is assigned by the billing flow."""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    subscription_plan = Column(String, default="free", nullable=False)  # free | starter | professional | enterprise
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Company(id={self.id}, name='{self.name}', plan='{self.subscription_plan}')>"
