import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from jobboard.core.auth_dependency import get_current_admin, get_db
from jobboard.core.errors import InternalError, JobBoardError
from jobboard.core.rate_limit import rate_limit
from jobboard.db.models.admin import Admin
from jobboard.schemas.auth import AdminProfile, LoginRequest
from jobboard.schemas.common import dump
from jobboard.services import principal_service
from jobboard.services.principal_service import ADMIN
from jobboard.services.upload_service import IMAGE_EXTENSIONS, UploadStore, get_upload_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    uploads: UploadStore = Depends(get_upload_store),
):
    """Create an admin account. Admins need no email verification and get a token immediately."""
    try:
        principal_service.check_registration_fields(ADMIN, name, email, password)
        with uploads.staged(image, "profile", IMAGE_EXTENSIONS) as reference:
            admin = principal_service.register(db, ADMIN, name, email, password, image=reference, role=role)

        return {
            "success": True,
            "message": "Admin registered successfully",
            "adminData": dump(AdminProfile.model_validate(admin)),
            "token": principal_service.issue_token(ADMIN, admin),
        }
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error registering admin: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to register admin", error=str(e))


@router.post("/login", dependencies=[Depends(rate_limit("admin-login"))])
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    try:
        result = principal_service.login(db, ADMIN, payload.email, payload.password)
        return {
            "success": True,
            "message": "Login successful",
            "adminData": dump(AdminProfile.model_validate(result.principal)),
            "token": result.token,
        }
    except JobBoardError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error logging in admin: {e}", exc_info=True)
        db.rollback()
        raise InternalError("Failed to login", error=str(e))


@router.get("/me")
def me(admin: Admin = Depends(get_current_admin)):
    return {
        "success": True,
        "message": "Admin data fetched successfully",
        "adminData": dump(AdminProfile.model_validate(admin)),
    }
