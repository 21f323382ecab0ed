import logging
import uuid
import bcrypt
from passlib.context import CryptContext
from datetime import datetime, timedelta
from jose import jwt, JWTError, ExpiredSignatureError
from jobboard.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72

# passlib only verifies hashes written by older deployments; new hashes use bcrypt directly
try:
    pwd_context = CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
    )
    logger.debug("Password context initialized")
except Exception as e:
    logger.warning(f"Failed to initialize passlib context: {e}, using bcrypt directly")
    pwd_context = None


class TokenInvalidError(Exception):
    """Token is malformed, has a bad signature, or lacks required claims."""


class TokenExpiredError(TokenInvalidError):
    """Token signature is valid but its exp claim has passed."""


def _password_bytes(password: str) -> bytes:
    """
    Encode a password for bcrypt, truncating to the 72-byte limit.

    Truncation backs off to a UTF-8 character boundary so the bytes hashed
    at signup and at login are always identical.
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) <= BCRYPT_MAX_BYTES:
        return password_bytes

    logger.warning("Password exceeds 72 bytes, truncating before hashing")
    truncated = password_bytes[:BCRYPT_MAX_BYTES]
    for i in range(0, 4):  # UTF-8 char is max 4 bytes
        candidate = truncated[:len(truncated) - i]
        try:
            candidate.decode("utf-8")
            return candidate
        except UnicodeDecodeError:
            continue
    return truncated


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string (bcrypt format compatible with passlib)

    Raises:
        ValueError: If password cannot be hashed
    """
    try:
        return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")
    except Exception as e:
        logger.error(f"Password hashing failed: {e}", exc_info=True)
        raise ValueError("Invalid password") from e


def verify_password(password: str, hashed: str) -> bool:
    """
    Verify a password against its hash.

    Supports both bcrypt-native hashes and passlib-wrapped hashes.

    Returns:
        True if password matches hash, False otherwise
    """
    if not password or not hashed:
        return False
    try:
        try:
            return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            if pwd_context:
                return pwd_context.verify(password, hashed)
            return False
    except Exception as e:
        logger.error(f"Password verification failed: {e}", exc_info=True)
        return False


def create_access_token(principal_id: int, kind: str, expires_delta: timedelta = None) -> str:
    """Issue a signed token for a principal of the given kind."""
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": str(principal_id),
        "kind": kind,
        "jti": uuid.uuid4().hex,
        "exp": expire,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Verify a token and return its claims.

    Raises:
        TokenExpiredError: signature valid but expired
        TokenInvalidError: anything else wrong with the token
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except JWTError as e:
        raise TokenInvalidError("Invalid token") from e

    sub = payload.get("sub")
    if sub is None or not str(sub).isdigit() or not payload.get("kind"):
        raise TokenInvalidError("Invalid token")

    payload["id"] = int(sub)
    return payload
