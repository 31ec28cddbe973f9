"""
Pydantic models for API request/response validation.
"""

from typing import Annotated, Literal

from email_validator import EmailNotValidError, validate_email
from fastapi import Path
from pydantic import BaseModel, Field, field_validator

from .database import DBArticle, DBComment, DBUser, DBWaitlistEntry

ArticleStatus = Literal["draft", "published", "archived"]

# Largest value an SQLite INTEGER column can hold
MAX_ROW_ID = 2**63 - 1

# Path parameter for a row id; out-of-range ids are rejected before any query
RowId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]


def _normalize_email(value: str) -> str:
    try:
        return validate_email(value.strip().lower(), check_deliverability=False).normalized
    except EmailNotValidError:
        raise ValueError("Please enter a valid email address") from None


def _require_full_name(value: str) -> str:
    value = value.strip()
    if len(value) < 2:
        raise ValueError("Full name must be at least 2 characters")
    return value


def _require_text(value: str, message: str) -> str:
    if not value or not value.strip():
        raise ValueError(message)
    return value


def _clean_tags(tags: list[str]) -> list[str]:
    """Drop blank and duplicate tags, keeping first-seen order."""
    cleaned: list[str] = []
    for tag in (t.strip() for t in tags):
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


# ─────────────────────────────────────────────────────────────
# Waitlist Schemas
# ─────────────────────────────────────────────────────────────

class WaitlistCreateRequest(BaseModel):
    """Request to join the waitlist."""
    full_name: str
    email: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str) -> str:
        return _require_full_name(v)


class WaitlistResponse(BaseModel):
    id: int
    full_name: str
    email: str
    created_at: str

    @classmethod
    def from_db(cls, entry: DBWaitlistEntry) -> "WaitlistResponse":
        return cls(
            id=entry.id,
            full_name=entry.full_name,
            email=entry.email,
            created_at=entry.created_at.isoformat(),
        )


class WaitlistCountResponse(BaseModel):
    count: int


# ─────────────────────────────────────────────────────────────
# User Schemas
# ─────────────────────────────────────────────────────────────

class RegisterRequest(BaseModel):
    """Request to create an account."""
    email: str
    password: str
    full_name: str
    phone: str | None = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str) -> str:
        return _require_full_name(v)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class UserUpdateRequest(BaseModel):
    """Profile fields a user may change on their own account."""
    full_name: str | None = None
    phone: str | None = None
    avatar: str | None = None

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str | None) -> str:
        # Only runs when full_name was sent; an explicit null cannot blank the name
        if v is None:
            raise ValueError("Full name must be at least 2 characters")
        return _require_full_name(v)


class UserResponse(BaseModel):
    """The signed-in user's own account. Never includes the password hash."""
    id: int
    email: str
    full_name: str
    phone: str | None
    avatar: str | None
    role: str
    is_active: bool
    points: int
    created_at: str
    updated_at: str

    @classmethod
    def from_db(cls, user: DBUser) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            phone=user.phone,
            avatar=user.avatar,
            role=user.role,
            is_active=user.is_active,
            points=user.points,
            created_at=user.created_at.isoformat(),
            updated_at=user.updated_at.isoformat(),
        )


class AuthorResponse(BaseModel):
    """Public view of a user, embedded in articles, comments and follow lists."""
    id: int
    full_name: str
    avatar: str | None
    role: str

    @classmethod
    def from_db(cls, user: DBUser) -> "AuthorResponse":
        return cls(
            id=user.id,
            full_name=user.full_name,
            avatar=user.avatar,
            role=user.role,
        )


class ProfileResponse(AuthorResponse):
    """Public profile with social counts."""
    points: int
    created_at: str
    followers_count: int
    following_count: int

    @classmethod
    def from_db_with_counts(cls, user: DBUser, counts: dict) -> "ProfileResponse":
        return cls(
            id=user.id,
            full_name=user.full_name,
            avatar=user.avatar,
            role=user.role,
            points=user.points,
            created_at=user.created_at.isoformat(),
            followers_count=counts["followers_count"],
            following_count=counts["following_count"],
        )


class FollowStatusResponse(BaseModel):
    is_following: bool


# ─────────────────────────────────────────────────────────────
# Article Schemas
# ─────────────────────────────────────────────────────────────

class ArticleCreateRequest(BaseModel):
    title: str
    content: str
    tags: list[str] = []
    status: ArticleStatus = "draft"

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        return _require_text(v, "Title is required").strip()

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str) -> str:
        return _require_text(v, "Content is required")

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class ArticleUpdateRequest(BaseModel):
    """Partial article update; only provided fields change."""
    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None
    status: ArticleStatus | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None) -> str | None:
        return _require_text(v, "Title is required").strip() if v is not None else None

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str | None) -> str | None:
        return _require_text(v, "Content is required") if v is not None else None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return _clean_tags(v)


class ArticleResponse(BaseModel):
    """Article with counters, membership lists and author."""
    id: int
    title: str
    content: str
    author_id: int
    status: str
    views: int
    likes: int
    liked_by: list[int]
    bookmarked_by: list[int]
    viewed_by: list[int]
    tags: list[str]
    created_at: str
    updated_at: str
    author: AuthorResponse | None = None

    @classmethod
    def from_db(cls, article: DBArticle) -> "ArticleResponse":
        return cls(
            id=article.id,
            title=article.title,
            content=article.content,
            author_id=article.author_id,
            status=article.status,
            views=article.views,
            likes=article.likes,
            liked_by=article.liked_by,
            bookmarked_by=article.bookmarked_by,
            viewed_by=article.viewed_by,
            tags=article.tags,
            created_at=article.created_at.isoformat(),
            updated_at=article.updated_at.isoformat(),
            author=AuthorResponse.from_db(article.author) if article.author else None,
        )


# ─────────────────────────────────────────────────────────────
# Comment Schemas
# ─────────────────────────────────────────────────────────────

class CommentCreateRequest(BaseModel):
    content: str
    parent_id: int | None = Field(default=None, ge=1, le=MAX_ROW_ID)

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str) -> str:
        return _require_text(v, "Content is required")


class CommentResponse(BaseModel):
    """Comment with its author and nested replies."""
    id: int
    content: str
    article_id: int
    user_id: int
    parent_id: int | None
    likes: int
    created_at: str
    updated_at: str
    user: AuthorResponse | None = None
    replies: list["CommentResponse"] = []

    @classmethod
    def from_db(cls, comment: DBComment) -> "CommentResponse":
        return cls(
            id=comment.id,
            content=comment.content,
            article_id=comment.article_id,
            user_id=comment.user_id,
            parent_id=comment.parent_id,
            likes=comment.likes,
            created_at=comment.created_at.isoformat(),
            updated_at=comment.updated_at.isoformat(),
            user=AuthorResponse.from_db(comment.user) if comment.user else None,
            replies=[cls.from_db(r) for r in comment.replies],
        )


class CommentLikeResponse(BaseModel):
    id: int
    likes: int
