"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-client request limits.
Order-executing endpoints carry a tighter limit than reads
so a single client cannot hammer the settlement path.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with the standard error body.

    Args:
        _request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response.
    """
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": "Too many requests",
            "detail": str(exc.detail),
        },
    )
