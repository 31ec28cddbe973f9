"""
Error types raised by the storage layer, and HTTP exception utilities for
common error patterns.

Provides helper functions to reduce boilerplate for common 404 errors.
"""

from typing import TypeVar

from fastapi import HTTPException

T = TypeVar("T")


class StorageError(Exception):
    """Base class for errors raised by the repositories."""


class DuplicateEmailError(StorageError):
    """An email that must be unique is already stored."""

    def __init__(self, email: str):
        super().__init__(f"Email already exists: {email}")
        self.email = email


def require_resource(resource: T | None, detail: str = "Resource not found") -> T:
    """
    Raise 404 if resource is None, otherwise return the resource.

    Usage:
        article = require_resource(db.get_article_by_id(id), "Article not found")
    """
    if resource is None:
        raise HTTPException(status_code=404, detail=detail)
    return resource


def require_article(article: T | None) -> T:
    """Raise 404 if article is None."""
    return require_resource(article, "Article not found")


def require_user(user: T | None) -> T:
    """Raise 404 if user is None."""
    return require_resource(user, "User not found")


def require_comment(comment: T | None) -> T:
    """Raise 404 if comment is None."""
    return require_resource(comment, "Comment not found")
