"""
Community Blog API Server

FastAPI application providing endpoints for:
- Waitlist signups
- Registration, login and profiles
- Articles with likes, bookmarks and view tracking
- Threaded comments
- Follows, bookmarks and reading history
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import __version__
from .config import config, state
from .database import Database
from .rate_limit import setup_rate_limiting
from .routes import (
    articles_router,
    auth_router,
    comments_router,
    me_router,
    misc_router,
    users_router,
    waitlist_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup application resources."""
    # Startup - skip if already initialized (e.g., by tests)
    if state.db is None:
        state.db = Database(config.DB_PATH)
        logger.info(f"Database opened at {config.DB_PATH}")

        purged = state.db.purge_expired_sessions()
        if purged:
            logger.info(f"Purged {purged} expired sessions")

    yield


app = FastAPI(
    title="Community Blog API",
    version=__version__,
    lifespan=lifespan
)

setup_rate_limiting(app)


def _validation_message(exc: RequestValidationError) -> str:
    """Turn the first validation error into a single readable message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    error = errors[0]
    if error.get("type") == "missing":
        field = error.get("loc", ("field",))[-1]
        return f"{field} is required"

    message = str(error.get("msg", "Invalid request"))
    prefix = "Value error, "
    if message.startswith(prefix):
        message = message[len(prefix):]
    return message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = _validation_message(exc)
    logger.debug(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"detail": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include routers
app.include_router(misc_router)
app.include_router(auth_router)
app.include_router(waitlist_router)
app.include_router(articles_router)
app.include_router(comments_router)
app.include_router(users_router)
app.include_router(me_router)
