from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jobboard.db.base import Base

APPLICATION_STATUSES = ("pending", "reviewed", "shortlisted", "accepted", "rejected")


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Copied from the job when the application is created
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    status = Column(String, nullable=False, default="pending")
    applied_date = Column(DateTime, nullable=False, default=datetime.utcnow)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    job = relationship("Job", back_populates="applications")
    user = relationship("User", back_populates="applications")
    company = relationship("Company")

    __table_args__ = (
        UniqueConstraint("user_id", "job_id", name="uq_job_applications_user_job"),
        Index("idx_job_applications_company_status", "company_id", "status"),
    )

    def __repr__(self):
        return f"<JobApplication(id={self.id}, user_id={self.user_id}, job_id={self.job_id}, status='{self.status}')>"
