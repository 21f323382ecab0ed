from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from jobboard.db.base import Base


class RevokedToken(Base):
    """Logged-out token ids. Only consulted when TOKEN_REVOCATION_ENABLED=1."""
    __tablename__ = "revoked_tokens"

    id = Column(Integer, primary_key=True)
    jti = Column(String(64), unique=True, index=True, nullable=False)
    principal_kind = Column(String, nullable=False)
    principal_id = Column(Integer, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
