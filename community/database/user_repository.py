"""
Repository for user operations.
"""

import sqlite3
from datetime import datetime

from ..exceptions import DuplicateEmailError
from .connection import DatabaseConnection
from .converters import row_to_user
from .models import DBUser


class UserRepository:
    """Repository for user CRUD operations."""

    # Columns update() is allowed to write
    UPDATABLE_FIELDS = frozenset({
        "full_name", "phone", "avatar", "role", "is_active", "points", "password",
    })

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def create(
        self,
        email: str,
        password_hash: str,
        full_name: str,
        phone: str | None = None,
    ) -> DBUser:
        """
        Create a new user.

        Args:
            email: Login email (unique)
            password_hash: Already-hashed password
            full_name: Display name
            phone: Optional phone number

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        now = datetime.now().isoformat()
        with self._db.conn() as conn:
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO users (email, password, full_name, phone, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (email, password_hash, full_name, phone, now, now)
                )
            except sqlite3.IntegrityError as e:
                raise DuplicateEmailError(email) from e

            row = conn.execute(
                "SELECT * FROM users WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()
            return row_to_user(row)

    def get_by_id(self, user_id: int) -> DBUser | None:
        """Get user by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            return row_to_user(row) if row else None

    def get_by_email(self, email: str) -> DBUser | None:
        """Get user by email."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?", (email,)
            ).fetchone()
            return row_to_user(row) if row else None

    def update(self, user_id: int, **fields) -> DBUser | None:
        """
        Update the given columns and refresh updated_at.

        Returns the updated user, or None if no such user exists.
        """
        unknown = set(fields) - self.UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {', '.join(sorted(unknown))}")

        assignments = [f"{column} = ?" for column in fields]
        assignments.append("updated_at = ?")
        params = list(fields.values()) + [datetime.now().isoformat(), user_id]

        with self._db.conn() as conn:
            conn.execute(
                f"UPDATE users SET {', '.join(assignments)} WHERE id = ?",
                params
            )
            row = conn.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            return row_to_user(row) if row else None

