"""Per-client request rate limiting.

Every route is covered by ``RATE_LIMIT`` through ``SlowAPIMiddleware``; the
login route carries its own, stricter ``LOGIN_RATE_LIMIT``. Counters live in
process memory and are keyed by client address.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from visitor_dashboard.core.config import settings

logger = logging.getLogger(__name__)

# Limits are read per request so they follow the live settings object
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[lambda: settings.RATE_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
    strategy="fixed-window",
)


def login_rate_limit() -> str:
    return settings.LOGIN_RATE_LIMIT


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded for %s on %s: %s", get_remote_address(request), request.url.path, exc.detail)
    return JSONResponse(
        status_code=429,
        content={
            "error": "Too many requests",
            "message": "Too many requests from this address, please try again later.",
        },
    )
