"""
Session repository - server-side session store.

Each row holds a JSON blob and an expiry; the client only carries the
signed session id.
"""

import json
import secrets
from datetime import datetime, timedelta

from .connection import DatabaseConnection


class SessionRepository:
    """Repository for login sessions."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def create(self, data: dict, max_age: int) -> str:
        """Store a new session and return its id."""
        sid = secrets.token_urlsafe(32)
        expire = datetime.now() + timedelta(seconds=max_age)
        with self._db.conn() as conn:
            conn.execute(
                "INSERT INTO session (sid, sess, expire) VALUES (?, ?, ?)",
                (sid, json.dumps(data), expire.isoformat())
            )
        return sid

    def get(self, sid: str) -> dict | None:
        """Get session data, or None if missing or expired (expired rows are removed)."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT sess, expire FROM session WHERE sid = ?", (sid,)
            ).fetchone()
            if not row:
                return None

            if datetime.fromisoformat(row["expire"]) <= datetime.now():
                conn.execute("DELETE FROM session WHERE sid = ?", (sid,))
                return None

            return json.loads(row["sess"])

    def destroy(self, sid: str):
        with self._db.conn() as conn:
            conn.execute("DELETE FROM session WHERE sid = ?", (sid,))

    def purge_expired(self) -> int:
        """Delete every expired session. Returns count removed."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                "DELETE FROM session WHERE expire <= ?",
                (datetime.now().isoformat(),)
            )
            return cursor.rowcount
