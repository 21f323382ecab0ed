"""
Pydantic schemas for job endpoints.
"""
from typing import List, Literal, Optional
from datetime import datetime
from pydantic import Field, field_validator, model_validator

from jobboard.schemas.common import CamelModel
from jobboard.schemas.category import CategoryRef

JobType = Literal["full-time", "part-time", "contract", "internship", "temporary"]
ExperienceLevel = Literal["entry", "mid", "senior", "executive"]
EmploymentType = Literal["permanent", "contract", "freelance"]
RemoteOption = Literal["remote", "hybrid", "on-site"]


class Location(CamelModel):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    pincode: Optional[str] = Field(None, pattern=r"^\d{6}$", description="6-digit pincode")

    @field_validator("city", "state", "country", "pincode", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class JobPayload(CamelModel):
    """
    Body for posting and updating a job.

    Required fields are optional here so the service can answer with one
    "Required fields ... are missing" message instead of a per-field list.
    """
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    location: Optional[Location] = None
    category: Optional[int] = Field(None, description="Category ID")
    job_type: Optional[JobType] = None
    experience_level: Optional[ExperienceLevel] = None
    employment_type: Optional[EmploymentType] = None
    remote_option: Optional[RemoteOption] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    skills: Optional[List[str]] = None
    visible: Optional[bool] = None

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        cleaned = [skill.strip() for skill in v if skill and skill.strip()]
        for skill in cleaned:
            if len(skill) > 50:
                raise ValueError("Each skill must be 50 characters or fewer")
        return cleaned

    @model_validator(mode="after")
    def check_salary_range(self):
        if self.salary_min is not None and self.salary_max is not None and self.salary_max < self.salary_min:
            raise ValueError("Salary max must be greater than or equal to salary min")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Backend Engineer",
                "description": "Build and run our APIs.",
                "location": {"city": "Pune", "state": "MH", "country": "India", "pincode": "411001"},
                "category": 1,
                "jobType": "full-time",
                "salaryMin": 50000,
                "salaryMax": 90000,
                "skills": ["python", "sql"]
            }
        }


class CompanyPublic(CamelModel):
    id: int = Field(..., alias="_id")
    name: str
    email: str
    image: str


class JobResponse(CamelModel):
    id: int = Field(..., alias="_id")
    title: str
    description: str
    location: Location
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    job_type: str
    experience_level: str
    employment_type: str
    remote_option: str
    skills: List[str] = []
    category_id: int
    category: Optional[CategoryRef] = None
    company_id: int
    visible: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PublicJobResponse(JobResponse):
    company: CompanyPublic


class CompanyJobResponse(JobResponse):
    applicants: int = 0


class JobSummary(CamelModel):
    """Job as embedded inside an application listing."""
    id: int = Field(..., alias="_id")
    title: str
    location: Location
    visible: bool
    created_at: Optional[datetime] = None
