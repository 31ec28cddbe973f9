"""
Repository for a user's personal collections: bookmarks and reading history.
"""

from datetime import datetime

from .article_repository import ARTICLE_SELECT
from .connection import DatabaseConnection
from .converters import row_to_article
from .models import DBArticle


class LibraryRepository:
    """Repository for bookmarks and reading history."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add_bookmark(self, user_id: int, article_id: int) -> bool:
        """Bookmark an article. Returns False if it was already bookmarked."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                """INSERT OR IGNORE INTO bookmarks (user_id, article_id, created_at)
                   VALUES (?, ?, ?)""",
                (user_id, article_id, datetime.now().isoformat())
            )
            return cursor.rowcount > 0

    def remove_bookmark(self, user_id: int, article_id: int) -> bool:
        with self._db.conn() as conn:
            cursor = conn.execute(
                "DELETE FROM bookmarks WHERE user_id = ? AND article_id = ?",
                (user_id, article_id)
            )
            return cursor.rowcount > 0

    def get_bookmarks(self, user_id: int) -> list[DBArticle]:
        """Bookmarked articles, most recently bookmarked first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                ARTICLE_SELECT + """
                JOIN bookmarks b ON b.article_id = a.id
                WHERE b.user_id = ?
                ORDER BY b.created_at DESC, b.id DESC
                """,
                (user_id,)
            ).fetchall()
            return [row_to_article(row) for row in rows]

    def add_history(self, user_id: int, article_id: int):
        """Append a reading history row."""
        with self._db.conn() as conn:
            conn.execute(
                "INSERT INTO reading_history (user_id, article_id, read_at) VALUES (?, ?, ?)",
                (user_id, article_id, datetime.now().isoformat())
            )

    def get_history(self, user_id: int) -> list[DBArticle]:
        """Articles from the reading history, newest read first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                ARTICLE_SELECT + """
                JOIN reading_history h ON h.article_id = a.id
                WHERE h.user_id = ?
                ORDER BY h.read_at DESC, h.id DESC
                """,
                (user_id,)
            ).fetchall()
            return [row_to_article(row) for row in rows]
