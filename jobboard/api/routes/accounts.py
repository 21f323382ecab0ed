"""
Account endpoints shared by users and companies.

`add_account_routes` mounts register, login, verify-otp, me, profile and
change-password on a router for one OTP-gated principal kind. The kind's own
router adds whatever else that principal can do.
"""
import logging
from typing import Callable, Optional, Type

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from jobboard.core.auth_dependency import get_db
from jobboard.core.errors import InternalError, JobBoardError
from jobboard.core.rate_limit import rate_limit
from jobboard.schemas.auth import ChangePasswordRequest, LoginRequest, PrincipalSummary, VerifyOtpRequest
from jobboard.schemas.common import CamelModel, dump
from jobboard.services import principal_service
from jobboard.services.mail_service import MailGateway, get_mailer
from jobboard.services.principal_service import PrincipalKind
from jobboard.services.upload_service import IMAGE_EXTENSIONS, UploadStore, get_upload_store

logger = logging.getLogger(__name__)

UNVERIFIED_LOGIN_MESSAGE = "Email not verified. A new OTP has been sent to your email."


def add_account_routes(
    router: APIRouter,
    kind: PrincipalKind,
    current_principal: Callable,
    profile_schema: Type[CamelModel],
) -> None:
    label = kind.label
    data_key = kind.data_key

    @router.post("/register", status_code=status.HTTP_201_CREATED)
    def register(
        background_tasks: BackgroundTasks,
        name: Optional[str] = Form(None),
        email: Optional[str] = Form(None),
        password: Optional[str] = Form(None),
        image: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
        mailer: MailGateway = Depends(get_mailer),
        uploads: UploadStore = Depends(get_upload_store),
    ):
        try:
            principal_service.check_registration_fields(kind, name, email, password)
            with uploads.staged(image, "profile", IMAGE_EXTENSIONS) as reference:
                principal = principal_service.register(db, kind, name, email, password, image=reference)

            background_tasks.add_task(mailer.send_otp, principal.email, principal.otp)

            return {
                "success": True,
                "message": f"{label} registered successfully. Please verify your email with the OTP sent.",
                data_key: dump(PrincipalSummary.model_validate(principal)),
            }
        except JobBoardError:
            db.rollback()
            raise
        except Exception as e:
            logger.error(f"Error registering {kind.name}: {e}", exc_info=True)
            db.rollback()
            raise InternalError(f"Failed to register {kind.name}", error=str(e))

    @router.post("/login", dependencies=[Depends(rate_limit(f"{kind.name}-login"))])
    def login(
        payload: LoginRequest,
        background_tasks: BackgroundTasks,
        db: Session = Depends(get_db),
        mailer: MailGateway = Depends(get_mailer),
    ):
        try:
            result = principal_service.login(db, kind, payload.email, payload.password)

            if result.needs_verification:
                background_tasks.add_task(mailer.send_otp, result.principal.email, result.principal.otp)
                return {
                    "success": False,
                    "isEmailVerified": False,
                    "message": UNVERIFIED_LOGIN_MESSAGE,
                }

            return {
                "success": True,
                "message": "Login successful",
                data_key: dump(profile_schema.model_validate(result.principal)),
                "token": result.token,
            }
        except JobBoardError:
            db.rollback()
            raise
        except Exception as e:
            logger.error(f"Error logging in {kind.name}: {e}", exc_info=True)
            db.rollback()
            raise InternalError("Failed to login", error=str(e))

    @router.post("/verify-otp", dependencies=[Depends(rate_limit(f"{kind.name}-verify-otp"))])
    def verify_otp(payload: VerifyOtpRequest, db: Session = Depends(get_db)):
        try:
            principal, token = principal_service.verify_otp(db, kind, payload.email, payload.otp)
            return {
                "success": True,
                "message": "Email verified successfully",
                data_key: dump(PrincipalSummary.model_validate(principal)),
                "token": token,
            }
        except JobBoardError:
            db.rollback()
            raise
        except Exception as e:
            logger.error(f"Error verifying {kind.name} OTP: {e}", exc_info=True)
            db.rollback()
            raise InternalError("Failed to verify OTP", error=str(e))

    @router.get("/me")
    def me(principal=Depends(current_principal)):
        return {
            "success": True,
            "message": f"{label} data fetched successfully",
            data_key: dump(profile_schema.model_validate(principal)),
        }

    @router.put("/profile")
    def update_profile(
        name: Optional[str] = Form(None),
        email: Optional[str] = Form(None),
        image: Optional[UploadFile] = File(None),
        principal=Depends(current_principal),
        db: Session = Depends(get_db),
        uploads: UploadStore = Depends(get_upload_store),
    ):
        try:
            with uploads.staged(image, "profile", IMAGE_EXTENSIONS) as reference:
                replaced = principal_service.update_profile(db, kind, principal, name, email, image=reference)

            # Old file goes only once the new reference is committed
            if replaced:
                uploads.discard(replaced)

            return {
                "success": True,
                "message": "Profile updated successfully",
                data_key: dump(profile_schema.model_validate(principal)),
            }
        except JobBoardError:
            db.rollback()
            raise
        except Exception as e:
            logger.error(f"Error updating {kind.name} profile: {e}", exc_info=True)
            db.rollback()
            raise InternalError("Failed to update profile", error=str(e))

    @router.post("/change-password")
    def change_password(
        payload: ChangePasswordRequest,
        principal=Depends(current_principal),
        db: Session = Depends(get_db),
    ):
        try:
            principal_service.change_password(
                db, kind, principal,
                payload.old_password, payload.new_password, payload.confirm_password,
            )
            return {"success": True, "message": "Password changed successfully"}
        except JobBoardError:
            db.rollback()
            raise
        except Exception as e:
            logger.error(f"Error changing {kind.name} password: {e}", exc_info=True)
            db.rollback()
            raise InternalError("Failed to change password", error=str(e))
