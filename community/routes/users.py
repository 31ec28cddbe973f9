"""
User routes: public profiles, authored articles and the follow graph.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from ..auth import CurrentUser
from ..config import get_db
from ..database import Database
from ..exceptions import require_user
from ..schemas import (
    ArticleResponse,
    AuthorResponse,
    FollowStatusResponse,
    ProfileResponse,
    RowId,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/{user_id}")
async def get_profile(
    user_id: RowId,
    db: Annotated[Database, Depends(get_db)]
) -> ProfileResponse:
    """Public profile with follower and following counts."""
    user = require_user(db.get_user_by_id(user_id))
    return ProfileResponse.from_db_with_counts(user, db.get_follow_counts(user_id))


@router.get("/{user_id}/articles")
async def get_user_articles(
    user_id: RowId,
    db: Annotated[Database, Depends(get_db)]
) -> list[ArticleResponse]:
    """Articles written by a user, newest first."""
    require_user(db.get_user_by_id(user_id))
    return [ArticleResponse.from_db(a) for a in db.get_user_articles(user_id)]


# ─────────────────────────────────────────────────────────────
# Follow graph
# ─────────────────────────────────────────────────────────────

@router.post("/{user_id}/follow")
async def follow(
    user_id: RowId,
    user: CurrentUser,
    db: Annotated[Database, Depends(get_db)]
) -> dict:
    """Follow a user. Following someone twice is a no-op."""
    if user_id == user.id:
        raise HTTPException(status_code=400, detail="You cannot follow yourself")
    require_user(db.get_user_by_id(user_id))

    if db.follow_user(user.id, user_id):
        logger.info(f"User {user.id} followed user {user_id}")
    return {"success": True, "is_following": True}


@router.post("/{user_id}/unfollow")
async def unfollow(
    user_id: RowId,
    user: CurrentUser,
    db: Annotated[Database, Depends(get_db)]
) -> dict:
    """Stop following a user."""
    require_user(db.get_user_by_id(user_id))
    db.unfollow_user(user.id, user_id)
    return {"success": True, "is_following": False}


@router.get("/{user_id}/followers")
async def list_followers(
    user_id: RowId,
    db: Annotated[Database, Depends(get_db)]
) -> list[AuthorResponse]:
    require_user(db.get_user_by_id(user_id))
    return [AuthorResponse.from_db(u) for u in db.get_followers(user_id)]


@router.get("/{user_id}/following")
async def list_following(
    user_id: RowId,
    db: Annotated[Database, Depends(get_db)]
) -> list[AuthorResponse]:
    require_user(db.get_user_by_id(user_id))
    return [AuthorResponse.from_db(u) for u in db.get_following(user_id)]


@router.get("/{user_id}/following/check")
async def check_following(
    user_id: RowId,
    user: CurrentUser,
    db: Annotated[Database, Depends(get_db)]
) -> FollowStatusResponse:
    """Whether the signed-in user follows this user."""
    return FollowStatusResponse(is_following=db.is_following(user.id, user_id))
