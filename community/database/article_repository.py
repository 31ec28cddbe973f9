"""
Article repository - CRUD operations for articles, plus the like, bookmark
and view membership toggles that keep the article counters in sync.
"""

import json
import sqlite3
from datetime import datetime

from .connection import DatabaseConnection
from .converters import author_select, row_to_article
from .models import DBArticle

# Membership lists derived from the join tables, one row per user
_MEMBERSHIP_COLUMNS = """
    (SELECT GROUP_CONCAT(user_id) FROM article_likes WHERE article_id = a.id) AS liked_by,
    (SELECT GROUP_CONCAT(user_id) FROM bookmarks WHERE article_id = a.id) AS bookmarked_by,
    (SELECT GROUP_CONCAT(user_id) FROM article_views WHERE article_id = a.id) AS viewed_by
"""

ARTICLE_SELECT = f"""
    SELECT a.*, {_MEMBERSHIP_COLUMNS}, {author_select("u")}
    FROM articles a
    JOIN users u ON u.id = a.author_id
"""


class ArticleRepository:
    """Repository for article operations."""

    UPDATABLE_FIELDS = frozenset({"title", "content", "status", "tags"})

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(
        self,
        author_id: int,
        title: str,
        content: str,
        tags: list[str] | None = None,
        status: str = "draft",
    ) -> DBArticle:
        """Add a new article and return it with its author."""
        now = datetime.now().isoformat()
        with self._db.conn() as conn:
            cursor = conn.execute(
                """INSERT INTO articles
                   (title, content, author_id, status, tags, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (title, content, author_id, status, json.dumps(tags or []), now, now)
            )
            return self._fetch(conn, cursor.lastrowid)

    def get(self, article_id: int) -> DBArticle | None:
        """Get single article by ID."""
        with self._db.conn() as conn:
            return self._fetch(conn, article_id)

    def get_by_author(self, author_id: int) -> list[DBArticle]:
        """Get an author's articles, newest first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                ARTICLE_SELECT + " WHERE a.author_id = ? ORDER BY a.created_at DESC, a.id DESC",
                (author_id,)
            ).fetchall()
            return [row_to_article(row) for row in rows]

    def get_all(self) -> list[DBArticle]:
        """Get every article with its author, newest first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                ARTICLE_SELECT + " ORDER BY a.created_at DESC, a.id DESC"
            ).fetchall()
            return [row_to_article(row) for row in rows]

    def update(self, article_id: int, **fields) -> DBArticle | None:
        """Update the given columns and refresh updated_at."""
        unknown = set(fields) - self.UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update article fields: {', '.join(sorted(unknown))}")

        if "tags" in fields:
            fields["tags"] = json.dumps(fields["tags"] or [])

        assignments = [f"{column} = ?" for column in fields]
        assignments.append("updated_at = ?")
        params = list(fields.values()) + [datetime.now().isoformat(), article_id]

        with self._db.conn() as conn:
            conn.execute(
                f"UPDATE articles SET {', '.join(assignments)} WHERE id = ?",
                params
            )
            return self._fetch(conn, article_id)

    def increment_views(self, article_id: int):
        """Bump the view counter without recording who viewed."""
        with self._db.conn() as conn:
            conn.execute(
                "UPDATE articles SET views = views + 1 WHERE id = ?",
                (article_id,)
            )

    # ─────────────────────────────────────────────────────────────
    # Membership toggles
    # ─────────────────────────────────────────────────────────────

    def toggle_like(self, user_id: int, article_id: int) -> bool | None:
        """
        Like or unlike an article for a user.

        The membership row and the likes counter change in one transaction,
        and the UNIQUE(user_id, article_id) constraint keeps concurrent likes
        from the same user down to a single row.

        Returns:
            True if the article is now liked, False if unliked,
            None if the article does not exist
        """
        with self._db.conn() as conn:
            if not self._exists(conn, article_id):
                return None

            cursor = conn.execute(
                """INSERT OR IGNORE INTO article_likes (user_id, article_id, created_at)
                   VALUES (?, ?, ?)""",
                (user_id, article_id, datetime.now().isoformat())
            )
            if cursor.rowcount:
                conn.execute(
                    "UPDATE articles SET likes = likes + 1 WHERE id = ?",
                    (article_id,)
                )
                return True

            conn.execute(
                "DELETE FROM article_likes WHERE user_id = ? AND article_id = ?",
                (user_id, article_id)
            )
            conn.execute(
                "UPDATE articles SET likes = MAX(likes - 1, 0) WHERE id = ?",
                (article_id,)
            )
            return False

    def toggle_bookmark(self, user_id: int, article_id: int) -> bool | None:
        """Bookmark or unbookmark an article. Returns new status, None if missing."""
        with self._db.conn() as conn:
            if not self._exists(conn, article_id):
                return None

            cursor = conn.execute(
                """INSERT OR IGNORE INTO bookmarks (user_id, article_id, created_at)
                   VALUES (?, ?, ?)""",
                (user_id, article_id, datetime.now().isoformat())
            )
            if cursor.rowcount:
                return True

            conn.execute(
                "DELETE FROM bookmarks WHERE user_id = ? AND article_id = ?",
                (user_id, article_id)
            )
            return False

    def record_view(self, user_id: int, article_id: int) -> bool | None:
        """
        Record a user's first view of an article.

        On the first view the counter is incremented and a reading history
        row is appended; later views by the same user change nothing.

        Returns:
            True if this was the user's first view, False if already viewed,
            None if the article does not exist
        """
        now = datetime.now().isoformat()
        with self._db.conn() as conn:
            if not self._exists(conn, article_id):
                return None

            cursor = conn.execute(
                """INSERT OR IGNORE INTO article_views (user_id, article_id, viewed_at)
                   VALUES (?, ?, ?)""",
                (user_id, article_id, now)
            )
            if not cursor.rowcount:
                return False

            conn.execute(
                "UPDATE articles SET views = views + 1 WHERE id = ?",
                (article_id,)
            )
            conn.execute(
                "INSERT INTO reading_history (user_id, article_id, read_at) VALUES (?, ?, ?)",
                (user_id, article_id, now)
            )
            return True

    # ─────────────────────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def _exists(conn: sqlite3.Connection, article_id: int) -> bool:
        return conn.execute(
            "SELECT 1 FROM articles WHERE id = ?", (article_id,)
        ).fetchone() is not None

    @staticmethod
    def _fetch(conn: sqlite3.Connection, article_id: int) -> DBArticle | None:
        row = conn.execute(
            ARTICLE_SELECT + " WHERE a.id = ?", (article_id,)
        ).fetchone()
        return row_to_article(row) if row else None
