import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from jobboard.core import config
from jobboard.core.auth_dependency import extract_token, get_db, is_revoked
from jobboard.core.security import TokenInvalidError, decode_access_token
from jobboard.db.models.revoked_token import RevokedToken

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/logout")
def logout(request: Request, db: Session = Depends(get_db)):
    """
    Log out. Always succeeds.

    Clients drop the token themselves; with TOKEN_REVOCATION_ENABLED=1 the
    token's jti is also recorded so it stops authenticating.
    """
    token = extract_token(request)
    if token:
        try:
            payload = decode_access_token(token)
            logger.info(f"Logout: kind={payload['kind']}, id={payload['id']}")

            if config.TOKEN_REVOCATION_ENABLED and payload.get("jti") and not is_revoked(db, payload["jti"]):
                db.add(RevokedToken(
                    jti=payload["jti"],
                    principal_kind=payload["kind"],
                    principal_id=payload["id"],
                    expires_at=datetime.utcfromtimestamp(payload["exp"]),
                ))
                db.commit()
        except TokenInvalidError:
            logger.info("Logout with an unusable token")

    return {"success": True, "message": "Logged out successfully"}
