import secrets
from datetime import datetime, timedelta
from typing import Optional

from jobboard.core.config import OTP_EXPIRE_MINUTES


def generate_otp(previous: Optional[str] = None) -> str:
    """Return a 6-digit numeric code, never equal to `previous`."""
    while True:
        code = str(100000 + secrets.randbelow(900000))
        if code != previous:
            return code


def otp_expiry(now: Optional[datetime] = None) -> datetime:
    return (now or datetime.utcnow()) + timedelta(minutes=OTP_EXPIRE_MINUTES)


def otp_matches(stored: Optional[str], expires: Optional[datetime], supplied: str, now: Optional[datetime] = None) -> bool:
    """True when the supplied code equals the stored one and has not expired."""
    if not stored or not expires or not supplied:
        return False
    if expires < (now or datetime.utcnow()):
        return False
    return secrets.compare_digest(stored, str(supplied).strip())
