"""
Error taxonomy and the JSON envelope every error is rendered in.

Handlers never raise Starlette HTTPException for domain failures; they raise
one of the JobBoardError subclasses below and the registered exception
handlers turn it into `{success: false, message, error?, errors?}`.
"""
import logging
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobboard.core.config import is_production

logger = logging.getLogger(__name__)


class JobBoardError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        error: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ):
        self.message = message or self.default_message
        self.error = error
        self.errors = errors
        super().__init__(self.message)


class ValidationError(JobBoardError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class BadRequestError(JobBoardError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class UnauthorizedError(JobBoardError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(JobBoardError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(JobBoardError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(JobBoardError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class PayloadTooLargeError(JobBoardError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_message = "File too large"


class TooManyRequestsError(JobBoardError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests"


class InternalError(JobBoardError):
    pass


def error_body(message: str, error: Optional[str] = None, errors: Optional[List[str]] = None) -> dict:
    """Build the failure envelope. Diagnostic text is dropped in production."""
    body = {"success": False, "message": message}
    if error and not is_production():
        body["error"] = error
    if errors:
        body["errors"] = errors
    return body


def _format_validation_errors(exc: RequestValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
        msg = err.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


async def jobboard_error_handler(request: Request, exc: JobBoardError):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error, exc.errors),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = _format_validation_errors(exc)
    logger.debug(f"Request validation failed: {request.method} {request.url.path} {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", errors=errors),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    # Driver text can carry bound parameters (hashes, OTPs); keep it in the log only
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body("Resource already exists"),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {exc} ({request.method} {request.url.path})",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", error=str(exc)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(JobBoardError, jobboard_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
