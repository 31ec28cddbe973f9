"""
Database facade - provides unified access to all repositories.

Route handlers receive one explicitly constructed Database through the
``get_db`` dependency and call the storage operations below; each one
delegates to a specialized repository.
"""

from pathlib import Path

from .connection import DatabaseConnection
from .article_repository import ArticleRepository
from .comment_repository import CommentRepository
from .follow_repository import FollowRepository
from .library_repository import LibraryRepository
from .session_repository import SessionRepository
from .user_repository import UserRepository
from .waitlist_repository import WaitlistRepository
from .models import DBArticle, DBComment, DBUser, DBWaitlistEntry


class Database:
    """
    Unified database access facade.
    """

    def __init__(self, db_path: Path):
        self._connection = DatabaseConnection(db_path)

        # Initialize repositories
        self.waitlist = WaitlistRepository(self._connection)
        self.users = UserRepository(self._connection)
        self.articles = ArticleRepository(self._connection)
        self.follows = FollowRepository(self._connection)
        self.comments = CommentRepository(self._connection)
        self.library = LibraryRepository(self._connection)
        self.sessions = SessionRepository(self._connection)

    @property
    def path(self) -> Path:
        return self._connection.db_path

    # ─────────────────────────────────────────────────────────────
    # Waitlist operations (delegated to WaitlistRepository)
    # ─────────────────────────────────────────────────────────────

    def add_to_waitlist(self, full_name: str, email: str) -> DBWaitlistEntry:
        return self.waitlist.add(full_name, email)

    def get_waitlist_count(self) -> int:
        return self.waitlist.count()

    # ─────────────────────────────────────────────────────────────
    # User operations (delegated to UserRepository)
    # ─────────────────────────────────────────────────────────────

    def create_user(
        self,
        email: str,
        password_hash: str,
        full_name: str,
        phone: str | None = None,
    ) -> DBUser:
        return self.users.create(email, password_hash, full_name, phone)

    def get_user_by_email(self, email: str) -> DBUser | None:
        return self.users.get_by_email(email)

    def get_user_by_id(self, user_id: int) -> DBUser | None:
        return self.users.get_by_id(user_id)

    def update_user(self, user_id: int, **fields) -> DBUser | None:
        return self.users.update(user_id, **fields)

    # ─────────────────────────────────────────────────────────────
    # Article operations (delegated to ArticleRepository)
    # ─────────────────────────────────────────────────────────────

    def create_article(
        self,
        author_id: int,
        title: str,
        content: str,
        tags: list[str] | None = None,
        status: str = "draft",
    ) -> DBArticle:
        return self.articles.add(author_id, title, content, tags, status)

    def get_article_by_id(self, article_id: int) -> DBArticle | None:
        return self.articles.get(article_id)

    def get_user_articles(self, user_id: int) -> list[DBArticle]:
        return self.articles.get_by_author(user_id)

    def update_article(self, article_id: int, **fields) -> DBArticle | None:
        return self.articles.update(article_id, **fields)

    def increment_article_views(self, article_id: int):
        return self.articles.increment_views(article_id)

    def get_all_articles(self) -> list[DBArticle]:
        return self.articles.get_all()

    def toggle_article_like(self, user_id: int, article_id: int) -> bool | None:
        return self.articles.toggle_like(user_id, article_id)

    def toggle_article_bookmark(self, user_id: int, article_id: int) -> bool | None:
        return self.articles.toggle_bookmark(user_id, article_id)

    def record_article_view(self, user_id: int, article_id: int) -> bool | None:
        return self.articles.record_view(user_id, article_id)

    # ─────────────────────────────────────────────────────────────
    # Social graph (delegated to FollowRepository)
    # ─────────────────────────────────────────────────────────────

    def follow_user(self, follower_id: int, following_id: int) -> bool:
        return self.follows.follow(follower_id, following_id)

    def unfollow_user(self, follower_id: int, following_id: int) -> bool:
        return self.follows.unfollow(follower_id, following_id)

    def get_followers(self, user_id: int) -> list[DBUser]:
        return self.follows.get_followers(user_id)

    def get_following(self, user_id: int) -> list[DBUser]:
        return self.follows.get_following(user_id)

    def is_following(self, follower_id: int, following_id: int) -> bool:
        return self.follows.is_following(follower_id, following_id)

    def get_follow_counts(self, user_id: int) -> dict:
        return self.follows.get_counts(user_id)

    # ─────────────────────────────────────────────────────────────
    # Comments (delegated to CommentRepository)
    # ─────────────────────────────────────────────────────────────

    def create_comment(
        self,
        article_id: int,
        user_id: int,
        content: str,
        parent_id: int | None = None,
    ) -> DBComment:
        return self.comments.add(article_id, user_id, content, parent_id)

    def get_comment(self, comment_id: int) -> DBComment | None:
        return self.comments.get(comment_id)

    def get_article_comments(self, article_id: int, max_depth: int = 1) -> list[DBComment]:
        return self.comments.get_for_article(article_id, max_depth)

    def get_replies(self, comment_id: int) -> list[DBComment]:
        return self.comments.get_replies(comment_id)

    def get_comment_with_replies(self, comment_id: int, max_depth: int = 1) -> DBComment | None:
        return self.comments.get_with_replies(comment_id, max_depth)

    def get_comment_depth(self, comment_id: int) -> int:
        return self.comments.get_depth(comment_id)

    def like_comment(self, comment_id: int) -> int | None:
        return self.comments.like(comment_id)

    # ─────────────────────────────────────────────────────────────
    # Bookmarks and reading history (delegated to LibraryRepository)
    # ─────────────────────────────────────────────────────────────

    def add_bookmark(self, user_id: int, article_id: int) -> bool:
        return self.library.add_bookmark(user_id, article_id)

    def remove_bookmark(self, user_id: int, article_id: int) -> bool:
        return self.library.remove_bookmark(user_id, article_id)

    def get_user_bookmarks(self, user_id: int) -> list[DBArticle]:
        return self.library.get_bookmarks(user_id)

    def add_to_reading_history(self, user_id: int, article_id: int):
        return self.library.add_history(user_id, article_id)

    def get_user_reading_history(self, user_id: int) -> list[DBArticle]:
        return self.library.get_history(user_id)

    # ─────────────────────────────────────────────────────────────
    # Sessions (delegated to SessionRepository)
    # ─────────────────────────────────────────────────────────────

    def create_session(self, data: dict, max_age: int) -> str:
        return self.sessions.create(data, max_age)

    def get_session(self, sid: str) -> dict | None:
        return self.sessions.get(sid)

    def destroy_session(self, sid: str):
        return self.sessions.destroy(sid)

    def purge_expired_sessions(self) -> int:
        return self.sessions.purge_expired()
