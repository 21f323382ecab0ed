"""
Public job board: visible jobs only, no authentication.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobboard.core.auth_dependency import get_db
from jobboard.schemas.common import dump
from jobboard.schemas.job import PublicJobResponse
from jobboard.services import job_service

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])


@router.get("")
def list_jobs(db: Session = Depends(get_db)):
    jobs = job_service.list_public_jobs(db)
    return {
        "success": True,
        "message": "Jobs fetched successfully",
        "jobData": [dump(PublicJobResponse.model_validate(job)) for job in jobs],
    }


@router.get("/{job_id}")
def get_job(job_id: int, db: Session = Depends(get_db)):
    job = job_service.get_public_job(db, job_id)
    return {
        "success": True,
        "message": "Job fetched successfully",
        "jobData": dump(PublicJobResponse.model_validate(job)),
    }
