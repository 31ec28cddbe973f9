"""
Rate limiting middleware for API protection.

Uses slowapi to limit requests per IP address. Login, registration and
waitlist signups are the endpoints most exposed to scripted abuse, but the
limit applies to every route. RATE_LIMIT_PER_MINUTE=0 turns it off.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import config

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 60


def get_rate_limit() -> str:
    """Default per-client limit as a slowapi limit string."""
    return f"{max(config.RATE_LIMIT_PER_MINUTE, 1)}/minute"


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[get_rate_limit()],
    enabled=config.RATE_LIMIT_PER_MINUTE > 0,
    storage_uri="memory://",  # Per-process counters, reset on restart
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(
        f"Rate limit exceeded by {get_remote_address(request)} on {request.url.path}"
    )
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests, please try again later"},
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


def setup_rate_limiting(app: FastAPI):
    """Attach the limiter, its middleware and the 429 handler to the app."""
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
