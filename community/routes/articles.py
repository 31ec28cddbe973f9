"""
Article routes: create, list, detail, edit, like/bookmark/view toggles and
the comment thread under each article.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from ..auth import CurrentUser
from ..config import config, get_db
from ..database import Database
from ..exceptions import require_article, require_resource
from ..schemas import (
    ArticleCreateRequest,
    ArticleResponse,
    ArticleUpdateRequest,
    CommentCreateRequest,
    CommentResponse,
    RowId,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/articles", tags=["articles"])

# Roles allowed to edit articles they did not write
EDITOR_ROLES = ("editor", "admin")


# ─────────────────────────────────────────────────────────────
# Create & List
# ─────────────────────────────────────────────────────────────

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_article(
    user: CurrentUser,
    request: ArticleCreateRequest,
    db: Annotated[Database, Depends(get_db)]
) -> ArticleResponse:
    """Publish a new article authored by the signed-in user."""
    article = db.create_article(
        author_id=user.id,
        title=request.title,
        content=request.content,
        tags=request.tags,
        status=request.status,
    )
    logger.info(f"User {user.id} created article {article.id}")
    return ArticleResponse.from_db(article)


@router.get("")
async def list_articles(
    db: Annotated[Database, Depends(get_db)]
) -> list[ArticleResponse]:
    """All articles with their authors, newest first."""
    return [ArticleResponse.from_db(a) for a in db.get_all_articles()]


# ─────────────────────────────────────────────────────────────
# Single Article Operations
# ─────────────────────────────────────────────────────────────

@router.get("/{article_id}")
async def get_article(
    article_id: RowId,
    db: Annotated[Database, Depends(get_db)]
) -> ArticleResponse:
    """Get a single article."""
    article = require_article(db.get_article_by_id(article_id))
    return ArticleResponse.from_db(article)


@router.patch("/{article_id}")
async def update_article(
    article_id: RowId,
    user: CurrentUser,
    request: ArticleUpdateRequest,
    db: Annotated[Database, Depends(get_db)]
) -> ArticleResponse:
    """Edit an article. Only its author, an editor or an admin may do this."""
    article = require_article(db.get_article_by_id(article_id))
    if article.author_id != user.id and user.role not in EDITOR_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only edit your own articles",
        )

    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return ArticleResponse.from_db(article)

    updated = db.update_article(article_id, **changes)
    return ArticleResponse.from_db(updated)


@router.post("/{article_id}/like")
async def toggle_like(
    article_id: RowId,
    user: CurrentUser,
    db: Annotated[Database, Depends(get_db)]
) -> ArticleResponse:
    """Like the article, or remove the like if already given."""
    require_article(db.toggle_article_like(user.id, article_id))
    return ArticleResponse.from_db(db.get_article_by_id(article_id))


@router.post("/{article_id}/bookmark")
async def toggle_bookmark(
    article_id: RowId,
    user: CurrentUser,
    db: Annotated[Database, Depends(get_db)]
) -> ArticleResponse:
    """Bookmark the article, or remove the bookmark if already set."""
    require_article(db.toggle_article_bookmark(user.id, article_id))
    return ArticleResponse.from_db(db.get_article_by_id(article_id))


@router.post("/{article_id}/view")
async def record_view(
    article_id: RowId,
    user: CurrentUser,
    db: Annotated[Database, Depends(get_db)]
) -> ArticleResponse:
    """Count a view. Only the first view per user is counted."""
    require_article(db.record_article_view(user.id, article_id))
    return ArticleResponse.from_db(db.get_article_by_id(article_id))


# ─────────────────────────────────────────────────────────────
# Comments
# ─────────────────────────────────────────────────────────────

@router.post("/{article_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_comment(
    article_id: RowId,
    user: CurrentUser,
    request: CommentCreateRequest,
    db: Annotated[Database, Depends(get_db)]
) -> CommentResponse:
    """Comment on an article, or reply to one of its comments."""
    require_article(db.get_article_by_id(article_id))

    if request.parent_id is not None:
        parent = require_resource(
            db.get_comment(request.parent_id), "Parent comment not found"
        )
        if parent.article_id != article_id:
            raise HTTPException(
                status_code=400,
                detail="Parent comment belongs to another article",
            )
        if db.get_comment_depth(parent.id) >= config.COMMENT_MAX_DEPTH:
            raise HTTPException(status_code=400, detail="Maximum reply depth reached")

    comment = db.create_comment(
        article_id=article_id,
        user_id=user.id,
        content=request.content,
        parent_id=request.parent_id,
    )
    return CommentResponse.from_db(comment)


@router.get("/{article_id}/comments")
async def list_comments(
    article_id: RowId,
    db: Annotated[Database, Depends(get_db)]
) -> list[CommentResponse]:
    """Top-level comments, newest first, each with its replies."""
    require_article(db.get_article_by_id(article_id))
    comments = db.get_article_comments(article_id, max_depth=config.COMMENT_MAX_DEPTH)
    return [CommentResponse.from_db(c) for c in comments]
