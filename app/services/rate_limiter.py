"""
Rate Limiting Service

Per-client rate limiting with slowapi, so a single client cannot flood
the API with logins or writes.

Rate Limit Tiers:
=================
- Default (every endpoint): settings.rate_limit_default
- Write operations (create/update/delete): settings.rate_limit_write
- Registration and login: settings.rate_limit_auth

Counters are kept in process memory; each worker limits independently.
"""

import logging

from fastapi import Request, status
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from app.config import get_settings
from app.schemas.envelope import error_response

logger = logging.getLogger(__name__)
settings = get_settings()

RETRY_AFTER_SECONDS = 60


def get_client_ip(request: Request) -> str:
    """
    Get client IP address for rate limiting.

    Handles common proxy headers to get the real client IP.
    Falls back to direct connection IP if no proxy headers.
    """
    # X-Forwarded-For can contain multiple IPs; first is the client
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    # nginx
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def create_limiter() -> Limiter:
    """
    Create and configure the rate limiter.

    Returns:
        Limiter using in-memory fixed-window counters
    """
    limiter = Limiter(
        key_func=get_client_ip,
        default_limits=[settings.rate_limit_default],
        storage_uri="memory://",
        strategy="fixed-window",
        enabled=settings.rate_limit_enabled,
    )

    logger.info(
        f"Rate limiter initialized - enabled: {settings.rate_limit_enabled}, "
        f"default: {settings.rate_limit_default}"
    )

    return limiter


limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Answer a throttled request with 429 and the error envelope.

    The Retry-After header tells the client how long to back off.
    """
    limit_detail = str(exc.detail)

    response = JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_response("Too many requests. Please slow down."),
    )
    response.headers["Retry-After"] = str(RETRY_AFTER_SECONDS)
    response.headers["X-RateLimit-Limit"] = limit_detail

    logger.warning(f"Rate limit exceeded for {get_client_ip(request)}: {limit_detail}")

    return response
