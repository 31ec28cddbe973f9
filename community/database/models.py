"""
Database models - dataclasses for database entities.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class DBWaitlistEntry:
    id: int
    full_name: str
    email: str
    created_at: datetime


@dataclass
class DBUser:
    id: int
    email: str
    password: str  # passlib hash, never serialized
    full_name: str
    phone: str | None
    avatar: str | None
    role: str  # user, editor, admin
    is_active: bool
    points: int
    created_at: datetime
    updated_at: datetime


@dataclass
class DBArticle:
    id: int
    title: str
    content: str
    author_id: int
    status: str  # draft, published, archived
    views: int
    likes: int
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    # Membership lists, derived from the like/bookmark/view tables
    liked_by: list[int] = field(default_factory=list)
    bookmarked_by: list[int] = field(default_factory=list)
    viewed_by: list[int] = field(default_factory=list)

    # Populated by queries that join the author
    author: DBUser | None = None


@dataclass
class DBComment:
    id: int
    content: str
    article_id: int
    user_id: int
    parent_id: int | None
    likes: int
    created_at: datetime
    updated_at: datetime
    user: DBUser | None = None
    replies: list["DBComment"] = field(default_factory=list)
