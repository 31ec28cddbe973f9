"""
Database module - SQLite operations for the community platform.

Uses repository pattern for better separation of concerns.
"""

from .connection import DatabaseConnection
from .models import DBArticle, DBComment, DBUser, DBWaitlistEntry
from .article_repository import ArticleRepository
from .comment_repository import CommentRepository
from .follow_repository import FollowRepository
from .library_repository import LibraryRepository
from .session_repository import SessionRepository
from .user_repository import UserRepository
from .waitlist_repository import WaitlistRepository
from .database import Database

__all__ = [
    "Database",
    "DatabaseConnection",
    "DBArticle",
    "DBComment",
    "DBUser",
    "DBWaitlistEntry",
    "ArticleRepository",
    "CommentRepository",
    "FollowRepository",
    "LibraryRepository",
    "SessionRepository",
    "UserRepository",
    "WaitlistRepository",
]
