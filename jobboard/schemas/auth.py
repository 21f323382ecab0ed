"""
Pydantic schemas for principal (user, company, admin) endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import Field

from jobboard.schemas.common import CamelModel


class LoginRequest(CamelModel):
    """Request schema for login; presence is checked by the service for friendlier messages."""
    email: Optional[str] = Field(None, description="Registered email address")
    password: Optional[str] = Field(None, description="Account password")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "hr@acme.example",
                "password": "secret1"
            }
        }


class VerifyOtpRequest(CamelModel):
    email: Optional[str] = None
    otp: Optional[str] = None


class ChangePasswordRequest(CamelModel):
    old_password: Optional[str] = Field(None, description="Current password")
    new_password: Optional[str] = Field(None, description="New password (min 6 characters)")
    confirm_password: Optional[str] = Field(None, description="Must equal newPassword")


class PrincipalSummary(CamelModel):
    """Returned by register and verify-otp."""
    id: int = Field(..., alias="_id")
    name: str
    email: str
    image: str


class UserProfile(PrincipalSummary):
    resume: str = ""
    is_email_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CompanyProfile(PrincipalSummary):
    is_email_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AdminProfile(PrincipalSummary):
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
