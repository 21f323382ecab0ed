"""
Simple in-memory rate limiter for credential endpoints (login, OTP verification).
"""
import logging
import time
from collections import defaultdict
from typing import Dict, List
from fastapi import Request

from jobboard.core.errors import TooManyRequestsError

logger = logging.getLogger(__name__)

# {"<scope>:<ip>": [timestamps]}
rate_limit_store: Dict[str, List[float]] = defaultdict(list)


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # First IP in the chain is the client
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


def check_rate_limit(request: Request, scope: str, max_requests: int = 10, window_seconds: int = 60) -> None:
    """
    Check if client has exceeded rate limit for a scope.

    Raises:
        TooManyRequestsError: 429 if rate limit exceeded
    """
    key = f"{scope}:{get_client_ip(request)}"
    now = time.time()

    cutoff = now - window_seconds
    rate_limit_store[key] = [
        timestamp for timestamp in rate_limit_store[key]
        if timestamp > cutoff
    ]

    request_count = len(rate_limit_store[key])

    if request_count >= max_requests:
        logger.warning(f"Rate limit exceeded for {key} ({request_count} requests in {window_seconds}s)")
        raise TooManyRequestsError(
            f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds."
        )

    rate_limit_store[key].append(now)


def rate_limit(scope: str, max_requests: int = 10, window_seconds: int = 60):
    """Dependency factory applying check_rate_limit to a route."""
    def limiter(request: Request) -> None:
        check_rate_limit(request, scope, max_requests, window_seconds)

    return limiter


def reset_rate_limits() -> None:
    rate_limit_store.clear()
