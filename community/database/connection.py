"""
Database connection management and schema initialization.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


class DatabaseConnection:
    """Manages database connection and schema."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def conn(self) -> Iterator[sqlite3.Connection]:
        """Get database connection with row factory.

        Everything executed inside one ``with`` block is a single transaction:
        it is committed when the block exits normally and rolled back otherwise.
        """
        connection = sqlite3.connect(self.db_path)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        try:
            yield connection
            connection.commit()
        except Exception:
            connection.rollback()
            raise
        finally:
            connection.close()

    def _init_schema(self):
        """Initialize database schema."""
        with self.conn() as connection:
            connection.executescript("""
                CREATE TABLE IF NOT EXISTS session (
                    sid TEXT PRIMARY KEY,
                    sess TEXT NOT NULL,
                    expire TIMESTAMP NOT NULL
                );

                CREATE TABLE IF NOT EXISTS waitlist (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    full_name TEXT NOT NULL,
                    email TEXT UNIQUE NOT NULL,
                    created_at TIMESTAMP NOT NULL
                );

                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT UNIQUE NOT NULL,
                    password TEXT NOT NULL,
                    full_name TEXT NOT NULL,
                    phone TEXT,
                    avatar TEXT,
                    role TEXT CHECK(role IN ('user', 'editor', 'admin')) NOT NULL DEFAULT 'user',
                    is_active BOOLEAN NOT NULL DEFAULT TRUE,
                    points INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                );

                CREATE TABLE IF NOT EXISTS follows (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    follower_id INTEGER NOT NULL REFERENCES users(id),
                    following_id INTEGER NOT NULL REFERENCES users(id),
                    created_at TIMESTAMP NOT NULL,
                    UNIQUE(follower_id, following_id)
                );

                CREATE TABLE IF NOT EXISTS articles (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL,
                    author_id INTEGER NOT NULL REFERENCES users(id),
                    status TEXT CHECK(status IN ('draft', 'published', 'archived')) NOT NULL DEFAULT 'draft',
                    views INTEGER NOT NULL DEFAULT 0,
                    likes INTEGER NOT NULL DEFAULT 0,
                    tags TEXT NOT NULL DEFAULT '[]',
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                );

                CREATE TABLE IF NOT EXISTS comments (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    content TEXT NOT NULL,
                    article_id INTEGER NOT NULL REFERENCES articles(id),
                    user_id INTEGER NOT NULL REFERENCES users(id),
                    parent_id INTEGER REFERENCES comments(id),
                    likes INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                );

                CREATE TABLE IF NOT EXISTS bookmarks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL REFERENCES users(id),
                    article_id INTEGER NOT NULL REFERENCES articles(id),
                    created_at TIMESTAMP NOT NULL,
                    UNIQUE(user_id, article_id)
                );

                CREATE TABLE IF NOT EXISTS article_likes (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL REFERENCES users(id),
                    article_id INTEGER NOT NULL REFERENCES articles(id),
                    created_at TIMESTAMP NOT NULL,
                    UNIQUE(user_id, article_id)
                );

                CREATE TABLE IF NOT EXISTS article_views (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL REFERENCES users(id),
                    article_id INTEGER NOT NULL REFERENCES articles(id),
                    viewed_at TIMESTAMP NOT NULL,
                    UNIQUE(user_id, article_id)
                );

                CREATE TABLE IF NOT EXISTS reading_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL REFERENCES users(id),
                    article_id INTEGER NOT NULL REFERENCES articles(id),
                    read_at TIMESTAMP NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_session_expire ON session(expire);
                CREATE INDEX IF NOT EXISTS idx_articles_author ON articles(author_id);
                CREATE INDEX IF NOT EXISTS idx_articles_created ON articles(created_at DESC);
                CREATE INDEX IF NOT EXISTS idx_comments_article ON comments(article_id, parent_id);
                CREATE INDEX IF NOT EXISTS idx_comments_parent ON comments(parent_id);
                CREATE INDEX IF NOT EXISTS idx_follows_following ON follows(following_id);
                CREATE INDEX IF NOT EXISTS idx_bookmarks_user ON bookmarks(user_id, created_at DESC);
                CREATE INDEX IF NOT EXISTS idx_article_likes_article ON article_likes(article_id);
                CREATE INDEX IF NOT EXISTS idx_article_views_article ON article_views(article_id);
                CREATE INDEX IF NOT EXISTS idx_reading_history_user ON reading_history(user_id, read_at DESC);
            """)
