import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from jobboard.api.routes.accounts import add_account_routes
from jobboard.core.auth_dependency import get_current_user, get_db
from jobboard.core.errors import InternalError, JobBoardError, ValidationError
from jobboard.db.models.user import User
from jobboard.schemas.application import ApplicationResponse, ApplyRequest, UserApplicationItem
from jobboard.schemas.auth import UserProfile
from jobboard.schemas.common import dump
from jobboard.services import application_service, principal_service
from jobboard.services.principal_service import USER
from jobboard.services.upload_service import RESUME_EXTENSIONS, UploadStore, get_upload_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["User"])

add_account_routes(router, USER, get_current_user, UserProfile)


@router.post("/upload-resume")
def upload_resume(
    resume: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    uploads: UploadStore = Depends(get_upload_store),
):
    """Replace the user's resume with an uploaded PDF/DOC/DOCX file."""
    if resume is None:
        raise ValidationError("Resume file is required")

    try:
        with uploads.staged(resume, "resume", RESUME_EXTENSIONS) as reference:
            previous = principal_service.set_resume(db, user, reference)

        if previous:
            uploads.discard(previous)

        return {
            "success": True,
            "message": "Resume uploaded successfully",
            "resumeUrl": reference,
        }
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error uploading resume: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to upload resume", error=str(e))


@router.post("/apply-job", status_code=status.HTTP_201_CREATED)
def apply_job(
    payload: ApplyRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        application = application_service.apply(db, user, payload.job_id)
        return {
            "success": True,
            "message": "Application submitted successfully",
            "jobApplication": dump(ApplicationResponse.model_validate(application)),
        }
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error applying for job: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to apply for job", error=str(e))


@router.get("/applications")
def list_applications(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    applications = application_service.list_for_user(db, user)
    return {
        "success": True,
        "message": "Applications fetched successfully",
        "jobApplications": [dump(UserApplicationItem.model_validate(a)) for a in applications],
    }
