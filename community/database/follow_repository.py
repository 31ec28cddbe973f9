"""
Repository for the follower graph.
"""

from datetime import datetime

from .connection import DatabaseConnection
from .converters import row_to_user
from .models import DBUser


class FollowRepository:
    """Repository for follow relationships between users."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def follow(self, follower_id: int, following_id: int) -> bool:
        """Follow a user. Returns False if the pair already existed."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                """INSERT OR IGNORE INTO follows (follower_id, following_id, created_at)
                   VALUES (?, ?, ?)""",
                (follower_id, following_id, datetime.now().isoformat())
            )
            return cursor.rowcount > 0

    def unfollow(self, follower_id: int, following_id: int) -> bool:
        """Unfollow a user. Returns False if there was nothing to remove."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                "DELETE FROM follows WHERE follower_id = ? AND following_id = ?",
                (follower_id, following_id)
            )
            return cursor.rowcount > 0

    def get_followers(self, user_id: int) -> list[DBUser]:
        """Users following user_id, most recent follow first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                """
                SELECT u.* FROM follows f
                JOIN users u ON u.id = f.follower_id
                WHERE f.following_id = ?
                ORDER BY f.created_at DESC, f.id DESC
                """,
                (user_id,)
            ).fetchall()
            return [row_to_user(row) for row in rows]

    def get_following(self, user_id: int) -> list[DBUser]:
        """Users that user_id follows, most recent follow first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                """
                SELECT u.* FROM follows f
                JOIN users u ON u.id = f.following_id
                WHERE f.follower_id = ?
                ORDER BY f.created_at DESC, f.id DESC
                """,
                (user_id,)
            ).fetchall()
            return [row_to_user(row) for row in rows]

    def is_following(self, follower_id: int, following_id: int) -> bool:
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT 1 FROM follows WHERE follower_id = ? AND following_id = ?",
                (follower_id, following_id)
            ).fetchone()
            return row is not None

    def get_counts(self, user_id: int) -> dict:
        """Follower and following counts for a profile."""
        with self._db.conn() as conn:
            followers = conn.execute(
                "SELECT COUNT(*) AS count FROM follows WHERE following_id = ?",
                (user_id,)
            ).fetchone()["count"]
            following = conn.execute(
                "SELECT COUNT(*) AS count FROM follows WHERE follower_id = ?",
                (user_id,)
            ).fetchone()["count"]

            return {
                "followers_count": followers,
                "following_count": following,
            }
