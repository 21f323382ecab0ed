import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from jobboard.api.routes.accounts import add_account_routes
from jobboard.core.auth_dependency import get_current_company, get_db
from jobboard.core.errors import InternalError, JobBoardError
from jobboard.db.models.company import Company
from jobboard.schemas.application import ApplicationResponse, CompanyApplicantItem, StatusChangeRequest
from jobboard.schemas.auth import CompanyProfile
from jobboard.schemas.common import build_pagination, dump
from jobboard.schemas.job import CompanyJobResponse, JobPayload, JobResponse
from jobboard.services import application_service, job_service
from jobboard.services.principal_service import COMPANY

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/company", tags=["Company"])

add_account_routes(router, COMPANY, get_current_company, CompanyProfile)


# ============================================
# Jobs
# ============================================

@router.post("/jobs", status_code=status.HTTP_201_CREATED)
def post_job(
    payload: JobPayload,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    try:
        job = job_service.post_job(db, company, payload)
        return {
            "success": True,
            "message": "Job posted successfully",
            "jobData": dump(JobResponse.model_validate(job)),
        }
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error posting job: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to post job", error=str(e))


@router.get("/jobs")
def list_jobs(
    search: Optional[str] = Query(None),
    category: Optional[int] = Query(None),
    is_visible: Optional[bool] = Query(None, alias="isVisible"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    """The company's own jobs, newest first, with applicant counts."""
    rows, total = job_service.list_company_jobs(
        db, company.id,
        search=search.strip() if search else None,
        category_id=category,
        is_visible=is_visible,
        page=page,
        limit=limit,
    )
    jobs = [
        dump(CompanyJobResponse.model_validate(job).model_copy(update={"applicants": applicants}))
        for job, applicants in rows
    ]
    return {
        "success": True,
        "message": "Jobs fetched successfully",
        "jobData": jobs,
        "pagination": build_pagination(total, page, limit),
    }


@router.put("/jobs/{job_id}")
def update_job(
    job_id: int,
    payload: JobPayload,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    try:
        job = job_service.update_job(db, company, job_id, payload)
        return {
            "success": True,
            "message": "Job updated successfully",
            "jobData": dump(JobResponse.model_validate(job)),
        }
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error updating job: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to update job", error=str(e))


@router.delete("/jobs/{job_id}")
def delete_job(
    job_id: int,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    try:
        job_service.delete_job(db, company, job_id)
        return {"success": True, "message": "Job deleted successfully"}
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error deleting job: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to delete job", error=str(e))


@router.post("/jobs/{job_id}/visibility")
def toggle_job_visibility(
    job_id: int,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    try:
        job, _ = job_service.toggle_visibility(db, company, job_id)
        return {
            "success": True,
            "message": "Job visibility updated",
            "jobData": dump(JobResponse.model_validate(job)),
        }
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error toggling job visibility: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to update job visibility", error=str(e))


# ============================================
# Applications
# ============================================

@router.get("/applications")
def list_applicants(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    applications, total = application_service.list_for_company(
        db, company,
        search=search.strip() if search else None,
        status=status_filter,
        page=page,
        limit=limit,
    )
    return {
        "success": True,
        "message": "Applications fetched successfully",
        "viewApplicationData": [dump(CompanyApplicantItem.model_validate(a)) for a in applications],
        "pagination": build_pagination(total, page, limit),
    }


@router.patch("/applications/{application_id}/status")
def change_application_status(
    application_id: int,
    payload: StatusChangeRequest,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    try:
        application = application_service.change_status(db, company, application_id, payload.status)
        return {
            "success": True,
            "message": "Application status updated successfully",
            "application": dump(ApplicationResponse.model_validate(application)),
        }
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error changing application status: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to change application status", error=str(e))
