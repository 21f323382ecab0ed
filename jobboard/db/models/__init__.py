"""
Database models module.

Imports every model so each table is registered on Base.metadata before
create_all() or Alembic autogenerate runs.
"""
from jobboard.db.models.admin import Admin
from jobboard.db.models.company import Company
from jobboard.db.models.user import User
from jobboard.db.models.category import Category
from jobboard.db.models.job import Job
from jobboard.db.models.job_application import JobApplication
from jobboard.db.models.revoked_token import RevokedToken

__all__ = [
    "Admin",
    "Company",
    "User",
    "Category",
    "Job",
    "JobApplication",
    "RevokedToken",
]
