"""
Database row converters - convert SQLite rows to dataclasses.
"""

import json
import sqlite3
from datetime import datetime

from .models import DBArticle, DBComment, DBUser, DBWaitlistEntry

# Column prefix used when a query joins the users table next to another entity
AUTHOR_PREFIX = "author__"

USER_COLUMNS = (
    "id", "email", "password", "full_name", "phone", "avatar",
    "role", "is_active", "points", "created_at", "updated_at",
)


def author_select(alias: str = "u") -> str:
    """SELECT fragment exposing every users column under AUTHOR_PREFIX."""
    return ", ".join(f"{alias}.{col} AS {AUTHOR_PREFIX}{col}" for col in USER_COLUMNS)


def _parse_timestamp(value: str | None) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            pass
    return datetime.now()


def _parse_id_list(value: str | None) -> list[int]:
    """Parse a GROUP_CONCAT of ids into a list of ints."""
    if not value:
        return []
    return [int(part) for part in value.split(",")]


def row_to_waitlist_entry(row: sqlite3.Row) -> DBWaitlistEntry:
    """Convert a database row to a DBWaitlistEntry."""
    return DBWaitlistEntry(
        id=row["id"],
        full_name=row["full_name"],
        email=row["email"],
        created_at=_parse_timestamp(row["created_at"]),
    )


def row_to_user(row: sqlite3.Row, prefix: str = "") -> DBUser:
    """Convert a database row to a DBUser.

    ``prefix`` selects columns aliased by ``author_select`` in join queries.
    """
    return DBUser(
        id=row[f"{prefix}id"],
        email=row[f"{prefix}email"],
        password=row[f"{prefix}password"],
        full_name=row[f"{prefix}full_name"],
        phone=row[f"{prefix}phone"],
        avatar=row[f"{prefix}avatar"],
        role=row[f"{prefix}role"] or "user",
        is_active=bool(row[f"{prefix}is_active"]),
        points=row[f"{prefix}points"] or 0,
        created_at=_parse_timestamp(row[f"{prefix}created_at"]),
        updated_at=_parse_timestamp(row[f"{prefix}updated_at"]),
    )


def _has_column(row: sqlite3.Row, column: str) -> bool:
    return column in row.keys()


def row_to_article(row: sqlite3.Row) -> DBArticle:
    """Convert a database row to a DBArticle.

    Membership lists and the author are filled in when the query selected them.
    """
    tags: list[str] = []
    if row["tags"]:
        try:
            tags = json.loads(row["tags"])
        except json.JSONDecodeError:
            pass

    author = None
    if _has_column(row, f"{AUTHOR_PREFIX}id") and row[f"{AUTHOR_PREFIX}id"] is not None:
        author = row_to_user(row, prefix=AUTHOR_PREFIX)

    return DBArticle(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        author_id=row["author_id"],
        status=row["status"] or "draft",
        views=row["views"] or 0,
        likes=row["likes"] or 0,
        tags=tags,
        created_at=_parse_timestamp(row["created_at"]),
        updated_at=_parse_timestamp(row["updated_at"]),
        liked_by=_parse_id_list(row["liked_by"]) if _has_column(row, "liked_by") else [],
        bookmarked_by=_parse_id_list(row["bookmarked_by"]) if _has_column(row, "bookmarked_by") else [],
        viewed_by=_parse_id_list(row["viewed_by"]) if _has_column(row, "viewed_by") else [],
        author=author,
    )


def row_to_comment(row: sqlite3.Row) -> DBComment:
    """Convert a database row to a DBComment."""
    user = None
    if _has_column(row, f"{AUTHOR_PREFIX}id") and row[f"{AUTHOR_PREFIX}id"] is not None:
        user = row_to_user(row, prefix=AUTHOR_PREFIX)

    return DBComment(
        id=row["id"],
        content=row["content"],
        article_id=row["article_id"],
        user_id=row["user_id"],
        parent_id=row["parent_id"],
        likes=row["likes"] or 0,
        created_at=_parse_timestamp(row["created_at"]),
        updated_at=_parse_timestamp(row["updated_at"]),
        user=user,
    )
