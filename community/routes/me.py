"""
Routes for the signed-in user's own collections.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from ..auth import CurrentUser
from ..config import get_db
from ..database import Database
from ..schemas import ArticleResponse

router = APIRouter(prefix="/api/me", tags=["me"])


@router.get("/bookmarks")
async def get_bookmarks(
    user: CurrentUser,
    db: Annotated[Database, Depends(get_db)]
) -> list[ArticleResponse]:
    """Bookmarked articles, most recent first."""
    return [ArticleResponse.from_db(a) for a in db.get_user_bookmarks(user.id)]


@router.get("/reading-history")
async def get_reading_history(
    user: CurrentUser,
    db: Annotated[Database, Depends(get_db)]
) -> list[ArticleResponse]:
    """Articles the user has opened, most recently read first."""
    return [ArticleResponse.from_db(a) for a in db.get_user_reading_history(user.id)]
