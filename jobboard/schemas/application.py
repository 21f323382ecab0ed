"""
Pydantic schemas for job application endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import Field

from jobboard.schemas.common import CamelModel
from jobboard.schemas.job import JobSummary


class ApplyRequest(CamelModel):
    job_id: Optional[int] = Field(None, description="Job to apply to")


class StatusChangeRequest(CamelModel):
    status: Optional[str] = Field(None, description="pending | reviewed | shortlisted | accepted | rejected")


class ApplicationResponse(CamelModel):
    id: int = Field(..., alias="_id")
    job_id: int
    user_id: int
    company_id: int
    status: str
    applied_date: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ApplicationCompany(CamelModel):
    id: int = Field(..., alias="_id")
    name: str
    email: str
    image: str


class Applicant(CamelModel):
    id: int = Field(..., alias="_id")
    name: str
    image: str
    resume: str = ""


class UserApplicationItem(ApplicationResponse):
    company: ApplicationCompany
    job: JobSummary


class CompanyApplicantItem(ApplicationResponse):
    user: Applicant
    job: JobSummary
