"""
Repository for article comments and their reply threads.
"""

import sqlite3
from datetime import datetime

from .connection import DatabaseConnection
from .converters import author_select, row_to_comment
from .models import DBComment

_COMMENT_SELECT = f"""
    SELECT c.*, {author_select("u")}
    FROM comments c
    JOIN users u ON u.id = c.user_id
"""

_NEWEST_FIRST = " ORDER BY c.created_at DESC, c.id DESC"


class CommentRepository:
    """Repository for comments.

    Comments form a tree through parent_id. Reads materialize a bounded
    number of reply levels; callers pass the depth they want.
    """

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(
        self,
        article_id: int,
        user_id: int,
        content: str,
        parent_id: int | None = None,
    ) -> DBComment:
        """Add a comment (or a reply when parent_id is set)."""
        now = datetime.now().isoformat()
        with self._db.conn() as conn:
            cursor = conn.execute(
                """INSERT INTO comments
                   (content, article_id, user_id, parent_id, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (content, article_id, user_id, parent_id, now, now)
            )
            row = conn.execute(
                _COMMENT_SELECT + " WHERE c.id = ?", (cursor.lastrowid,)
            ).fetchone()
            return row_to_comment(row)

    def get(self, comment_id: int) -> DBComment | None:
        """Get a single comment with its author."""
        with self._db.conn() as conn:
            row = conn.execute(
                _COMMENT_SELECT + " WHERE c.id = ?", (comment_id,)
            ).fetchone()
            return row_to_comment(row) if row else None

    def get_for_article(self, article_id: int, max_depth: int = 1) -> list[DBComment]:
        """
        Get top-level comments for an article, newest first.

        Each comment carries its replies (newest first) down to max_depth
        levels; max_depth=0 returns top-level comments only.
        """
        with self._db.conn() as conn:
            rows = conn.execute(
                _COMMENT_SELECT + " WHERE c.article_id = ? AND c.parent_id IS NULL" + _NEWEST_FIRST,
                (article_id,)
            ).fetchall()
            comments = [row_to_comment(row) for row in rows]
            self._attach_replies(conn, comments, max_depth)
            return comments

    def get_replies(self, comment_id: int) -> list[DBComment]:
        """Direct replies to a comment, newest first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                _COMMENT_SELECT + " WHERE c.parent_id = ?" + _NEWEST_FIRST,
                (comment_id,)
            ).fetchall()
            return [row_to_comment(row) for row in rows]

    def get_with_replies(self, comment_id: int, max_depth: int = 1) -> DBComment | None:
        """Get a comment with its reply tree down to max_depth levels."""
        with self._db.conn() as conn:
            row = conn.execute(
                _COMMENT_SELECT + " WHERE c.id = ?", (comment_id,)
            ).fetchone()
            if not row:
                return None

            comment = row_to_comment(row)
            self._attach_replies(conn, [comment], max_depth)
            return comment

    def get_depth(self, comment_id: int) -> int:
        """Number of ancestors above a comment (0 for a top-level comment)."""
        with self._db.conn() as conn:
            row = conn.execute(
                """
                WITH RECURSIVE ancestors(id, parent_id, depth) AS (
                    SELECT id, parent_id, 0 FROM comments WHERE id = ?
                    UNION ALL
                    SELECT c.id, c.parent_id, a.depth + 1
                    FROM comments c
                    JOIN ancestors a ON c.id = a.parent_id
                )
                SELECT MAX(depth) AS depth FROM ancestors
                """,
                (comment_id,)
            ).fetchone()
            return row["depth"] or 0

    def like(self, comment_id: int) -> int | None:
        """Increment a comment's like counter. Returns the new count, None if missing."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                "UPDATE comments SET likes = likes + 1 WHERE id = ?",
                (comment_id,)
            )
            if not cursor.rowcount:
                return None

            return conn.execute(
                "SELECT likes FROM comments WHERE id = ?", (comment_id,)
            ).fetchone()["likes"]

    def _attach_replies(
        self,
        conn: sqlite3.Connection,
        roots: list[DBComment],
        max_depth: int
    ):
        """Fill in replies level by level, one query per level."""
        frontier = {c.id: c for c in roots}
        depth = 0
        while frontier and depth < max_depth:
            placeholders = ", ".join("?" for _ in frontier)
            rows = conn.execute(
                _COMMENT_SELECT + f" WHERE c.parent_id IN ({placeholders})" + _NEWEST_FIRST,
                list(frontier)
            ).fetchall()

            next_frontier: dict[int, DBComment] = {}
            for row in rows:
                reply = row_to_comment(row)
                frontier[reply.parent_id].replies.append(reply)
                next_frontier[reply.id] = reply

            frontier = next_frontier
            depth += 1
