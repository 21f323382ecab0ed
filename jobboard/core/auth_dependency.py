import logging
from typing import Optional, Union

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from jobboard.core import config
from jobboard.core.errors import ForbiddenError, NotFoundError, UnauthorizedError
from jobboard.core.security import TokenExpiredError, TokenInvalidError, decode_access_token
from jobboard.db.models.admin import Admin
from jobboard.db.models.company import Company
from jobboard.db.models.revoked_token import RevokedToken
from jobboard.db.models.user import User
from jobboard.db.session import SessionLocal

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = "Unauthorized. Token is required. Please login again."


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def extract_token(request: Request) -> Optional[str]:
    """
    Read the token from the `token` header, falling back to Authorization.

    Authorization may carry `Bearer <token>` or the bare token.
    """
    token = request.headers.get("token")
    if token and token.strip():
        return token.strip()

    authorization = request.headers.get("Authorization")
    if authorization and authorization.strip():
        value = authorization.strip()
        scheme, _, credentials = value.partition(" ")
        if scheme.lower() == "bearer":
            value = credentials.strip()
        return value or None

    return None


def is_revoked(db: Session, jti: Optional[str]) -> bool:
    if not config.TOKEN_REVOCATION_ENABLED or not jti:
        return False
    return db.query(RevokedToken.id).filter(RevokedToken.jti == jti).first() is not None


def _resolve(request: Request, db: Session, kinds: dict):
    """
    Authenticate the request against the accepted principal kinds.

    `kinds` maps a token kind claim to its model class.
    """
    token = extract_token(request)
    if not token:
        raise UnauthorizedError(MISSING_TOKEN_MESSAGE)

    try:
        payload = decode_access_token(token)
    except TokenExpiredError:
        raise UnauthorizedError("Token expired")
    except TokenInvalidError:
        raise UnauthorizedError("Invalid token")

    model = kinds.get(payload["kind"])
    if model is None:
        logger.info(f"Token of kind '{payload['kind']}' rejected on {request.url.path}")
        raise UnauthorizedError("Invalid token")

    if is_revoked(db, payload.get("jti")):
        raise UnauthorizedError("Token has been revoked. Please login again.")

    principal = db.query(model).filter(model.id == payload["id"]).first()
    if not principal:
        raise NotFoundError(f"{payload['kind'].capitalize()} not found")

    if isinstance(principal, Admin) and not principal.is_active:
        raise ForbiddenError("Admin account is deactivated. Please contact superadmin.")

    request.state.principal_kind = payload["kind"]
    return principal


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    return _resolve(request, db, {"user": User})


def get_current_company(request: Request, db: Session = Depends(get_db)) -> Company:
    return _resolve(request, db, {"company": Company})


def get_current_admin(request: Request, db: Session = Depends(get_db)) -> Admin:
    return _resolve(request, db, {"admin": Admin})


def get_category_manager(request: Request, db: Session = Depends(get_db)) -> Union[Company, Admin]:
    """Categories are managed by companies and admins alike."""
    return _resolve(request, db, {"company": Company, "admin": Admin})
