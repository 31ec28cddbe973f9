"""
Repository for pre-launch waitlist entries.
"""

import sqlite3
from datetime import datetime

from ..exceptions import DuplicateEmailError
from .connection import DatabaseConnection
from .converters import row_to_waitlist_entry
from .models import DBWaitlistEntry


class WaitlistRepository:
    """Repository for waitlist signups."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(self, full_name: str, email: str) -> DBWaitlistEntry:
        """Add an entry. Raises DuplicateEmailError if the email already joined."""
        with self._db.conn() as conn:
            try:
                cursor = conn.execute(
                    "INSERT INTO waitlist (full_name, email, created_at) VALUES (?, ?, ?)",
                    (full_name, email, datetime.now().isoformat())
                )
            except sqlite3.IntegrityError as e:
                raise DuplicateEmailError(email) from e

            row = conn.execute(
                "SELECT * FROM waitlist WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()
            return row_to_waitlist_entry(row)

    def count(self) -> int:
        with self._db.conn() as conn:
            return conn.execute("SELECT COUNT(*) AS count FROM waitlist").fetchone()["count"]
