"""
Miscellaneous routes: health check.
"""

from fastapi import APIRouter

from .. import __version__

router = APIRouter(prefix="/api", tags=["misc"])


@router.get("/status")
async def health_check() -> dict:
    """API health check."""
    return {
        "status": "ok",
        "version": __version__,
    }
