"""
Job posting owned by a company and classified by a category.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from jobboard.db.base import Base

JOB_TYPES = ("full-time", "part-time", "contract", "internship", "temporary")
EXPERIENCE_LEVELS = ("entry", "mid", "senior", "executive")
EMPLOYMENT_TYPES = ("permanent", "contract", "freelance")
REMOTE_OPTIONS = ("remote", "hybrid", "on-site")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)

    # Location
    location_city = Column(String, nullable=False)
    location_state = Column(String, nullable=False)
    location_country = Column(String, nullable=False)
    location_pincode = Column(String(6), nullable=True)

    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)

    job_type = Column(String, nullable=False, default="full-time")
    experience_level = Column(String, nullable=False, default="entry")
    employment_type = Column(String, nullable=False, default="permanent")
    remote_option = Column(String, nullable=False, default="on-site")
    skills = Column(JSON, nullable=False, default=list)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    visible = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    company = relationship("Company", back_populates="jobs")
    category = relationship("Category")
    applications = relationship("JobApplication", back_populates="job")

    __table_args__ = (
        Index("idx_jobs_company_visible", "company_id", "visible"),
    )

    @property
    def location(self) -> dict:
        return {
            "city": self.location_city,
            "state": self.location_state,
            "country": self.location_country,
            "pincode": self.location_pincode,
        }

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company_id={self.company_id})>"
