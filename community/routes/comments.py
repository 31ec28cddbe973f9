"""
Comment routes addressed by comment id.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from ..auth import require_login
from ..config import config, get_db
from ..database import Database
from ..exceptions import require_comment
from ..schemas import CommentLikeResponse, CommentResponse, RowId

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.get("/{comment_id}")
async def get_comment(
    comment_id: RowId,
    db: Annotated[Database, Depends(get_db)]
) -> CommentResponse:
    """Get a comment with its replies."""
    comment = require_comment(
        db.get_comment_with_replies(comment_id, max_depth=config.COMMENT_MAX_DEPTH)
    )
    return CommentResponse.from_db(comment)


@router.post("/{comment_id}/like", dependencies=[Depends(require_login)])
async def like_comment(
    comment_id: RowId,
    db: Annotated[Database, Depends(get_db)]
) -> CommentLikeResponse:
    """Increment the comment's like counter.

    Unlike articles, comment likes are a plain counter: the same user can
    like a comment more than once.
    """
    likes = require_comment(db.like_comment(comment_id))
    return CommentLikeResponse(id=comment_id, likes=likes)
