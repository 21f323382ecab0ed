"""
Principal service: registration, login, OTP verification and profile upkeep
for users, companies and admins.

The three principal kinds share one code path. A PrincipalKind describes what
differs between them (required image, OTP-gated login, active-flag-gated login,
response key and messages); every function takes the kind as its first
argument after the session.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from jobboard.core.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from jobboard.core.security import create_access_token, hash_password, verify_password
from jobboard.db.models.admin import ADMIN_ROLES, Admin
from jobboard.db.models.company import Company
from jobboard.db.models.user import User
from jobboard.db.session import commit_unique
from jobboard.services.otp import generate_otp, otp_expiry, otp_matches

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class PrincipalKind:
    name: str
    label: str
    model: type
    data_key: str
    image_required: bool
    image_missing_message: str
    otp_gated: bool
    active_gated: bool
    enforce_min_password: bool


USER = PrincipalKind(
    name="user",
    label="User",
    model=User,
    data_key="userData",
    image_required=True,
    image_missing_message="Upload your image",
    otp_gated=True,
    active_gated=False,
    enforce_min_password=False,
)

COMPANY = PrincipalKind(
    name="company",
    label="Company",
    model=Company,
    data_key="companyData",
    image_required=True,
    image_missing_message="Upload your logo",
    otp_gated=True,
    active_gated=False,
    enforce_min_password=False,
)

ADMIN = PrincipalKind(
    name="admin",
    label="Admin",
    model=Admin,
    data_key="adminData",
    image_required=False,
    image_missing_message="",
    otp_gated=False,
    active_gated=True,
    enforce_min_password=True,
)

KINDS = {kind.name: kind for kind in (USER, COMPANY, ADMIN)}


@dataclass
class LoginResult:
    principal: object
    token: Optional[str]

    @property
    def needs_verification(self) -> bool:
        return self.token is None


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def find_by_email(db: Session, kind: PrincipalKind, email: str):
    return db.query(kind.model).filter(kind.model.email == normalize_email(email)).first()


def get_by_id(db: Session, kind: PrincipalKind, principal_id: int):
    return db.query(kind.model).filter(kind.model.id == principal_id).first()


def issue_token(kind: PrincipalKind, principal) -> str:
    return create_access_token(principal.id, kind.name)


def _deactivated_message() -> str:
    return "Admin account is deactivated. Please contact superadmin."


def check_registration_fields(
    kind: PrincipalKind,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> None:
    """Validate the text fields of a registration; routes call this before storing the upload."""
    if not name or not name.strip():
        raise ValidationError("Enter your name")
    if not email or not email.strip():
        raise ValidationError("Enter your email")
    if not password:
        raise ValidationError("Enter your password")
    if kind.enforce_min_password and len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def register(
    db: Session,
    kind: PrincipalKind,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    image: Optional[str] = None,
    role: Optional[str] = None,
):
    """
    Create a principal.

    OTP-gated kinds are stored unverified with a fresh code; the caller is
    responsible for mailing `principal.otp`. Admins are stored active.

    Raises:
        ValidationError: missing/invalid fields
        ConflictError: email already registered for this kind
    """
    check_registration_fields(kind, name, email, password)
    if kind.image_required and not image:
        raise ValidationError(kind.image_missing_message)
    if kind is ADMIN:
        role = role or "admin"
        if role not in ADMIN_ROLES:
            raise ValidationError(f"Role must be one of: {', '.join(ADMIN_ROLES)}")

    if find_by_email(db, kind, email):
        raise ConflictError(f"{kind.label} already exists")

    fields = {
        "name": name.strip(),
        "email": normalize_email(email),
        "password_hash": hash_password(password),
        "image": image or "",
    }
    if kind.otp_gated:
        fields["otp"] = generate_otp()
        fields["otp_expires"] = otp_expiry()
    if kind is ADMIN:
        fields["role"] = role
        fields["is_active"] = True

    principal = kind.model(**fields)
    db.add(principal)
    commit_unique(db, f"{kind.label} already exists")
    db.refresh(principal)

    logger.info(f"{kind.label} registered: id={principal.id}, email={principal.email}")
    return principal


def _refresh_otp(db: Session, principal) -> str:
    principal.otp = generate_otp(previous=principal.otp)
    principal.otp_expires = otp_expiry()
    db.commit()
    return principal.otp


def login(db: Session, kind: PrincipalKind, email: Optional[str], password: Optional[str]) -> LoginResult:
    """
    Authenticate by email/password.

    For OTP-gated kinds an unverified principal gets a new code and a
    LoginResult without token; the password is not checked in that case.

    Raises:
        ValidationError: missing fields
        NotFoundError: no such principal
        ForbiddenError: deactivated admin
        UnauthorizedError: wrong password
    """
    if not email:
        raise ValidationError("Email is required")
    if not password:
        raise ValidationError("Password is required")

    principal = find_by_email(db, kind, email)
    if not principal:
        raise NotFoundError(f"{kind.label} not found")

    if kind.active_gated and not principal.is_active:
        raise ForbiddenError(_deactivated_message())

    if kind.otp_gated and not principal.is_email_verified:
        _refresh_otp(db, principal)
        logger.info(f"{kind.label} login before verification, new OTP issued: id={principal.id}")
        return LoginResult(principal=principal, token=None)

    if not verify_password(password, principal.password_hash):
        logger.info(f"{kind.label} login failed (bad password): id={principal.id}")
        raise UnauthorizedError("Invalid password")

    logger.info(f"{kind.label} logged in: id={principal.id}")
    return LoginResult(principal=principal, token=issue_token(kind, principal))


def verify_otp(db: Session, kind: PrincipalKind, email: Optional[str], otp: Optional[str]):
    """
    Mark an OTP-gated principal verified and issue its first token.

    Returns:
        (principal, token)
    """
    if not email or not otp:
        raise ValidationError("Email and OTP are required")

    principal = find_by_email(db, kind, email)
    if not principal:
        raise NotFoundError(f"{kind.label} not found")

    if principal.is_email_verified:
        raise BadRequestError("Email already verified")

    if not otp_matches(principal.otp, principal.otp_expires, otp, now=datetime.utcnow()):
        raise BadRequestError("Invalid or expired OTP")

    principal.is_email_verified = True
    principal.otp = None
    principal.otp_expires = None
    db.commit()
    db.refresh(principal)

    logger.info(f"{kind.label} email verified: id={principal.id}")
    return principal, issue_token(kind, principal)


def update_profile(
    db: Session,
    kind: PrincipalKind,
    principal,
    name: Optional[str],
    email: Optional[str],
    image: Optional[str] = None,
):
    """
    Update name/email and optionally the image reference.

    Returns:
        The image reference that was replaced (None when unchanged), so the
        caller can delete the old file once the commit succeeded.
    """
    if not name or not name.strip():
        raise ValidationError(f"{kind.label} name is required")
    if not email or not email.strip():
        raise ValidationError("Email is required")

    email = normalize_email(email)
    clash = db.query(kind.model).filter(
        kind.model.email == email,
        kind.model.id != principal.id,
    ).first()
    if clash:
        raise ConflictError("Email already exists")

    replaced_image = None
    principal.name = name.strip()
    principal.email = email
    if image:
        replaced_image = principal.image or None
        principal.image = image

    commit_unique(db, "Email already exists")
    db.refresh(principal)

    logger.info(f"{kind.label} profile updated: id={principal.id}")
    return replaced_image


def change_password(
    db: Session,
    kind: PrincipalKind,
    principal,
    old_password: Optional[str],
    new_password: Optional[str],
    confirm_password: Optional[str],
) -> None:
    if not old_password:
        raise ValidationError("Old password is required")
    if not new_password:
        raise ValidationError("New password is required")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not confirm_password:
        raise ValidationError("Confirm password is required")
    if new_password != confirm_password:
        raise ValidationError("Passwords do not match")

    if not verify_password(old_password, principal.password_hash):
        raise UnauthorizedError("Invalid old password")

    principal.password_hash = hash_password(new_password)
    db.commit()

    logger.info(f"{kind.label} password changed: id={principal.id}")


def set_resume(db: Session, user: User, resume: str) -> Optional[str]:
    """Point a user at a new resume; returns the previous reference."""
    previous = user.resume or None
    user.resume = resume
    db.commit()
    db.refresh(user)
    logger.info(f"Resume uploaded: user_id={user.id}")
    return previous
