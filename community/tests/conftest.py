"""
Pytest fixtures for backend tests.
"""

import os
import tempfile
from pathlib import Path

# Configure before the app is imported: config is read at import time
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "0")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SESSION_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient

from community.config import state
from community.database import Database
from community.server import app

DEFAULT_PASSWORD = "correct-horse-battery"


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        yield Path(f.name)
    # Cleanup
    if os.path.exists(f.name):
        os.unlink(f.name)


@pytest.fixture
def test_db(temp_db_path):
    """Create a test database instance."""
    db = Database(temp_db_path)
    yield db


@pytest.fixture
def client(test_db):
    """Create a test client with an isolated database."""
    original_db = state.db
    state.db = test_db

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    state.db = original_db


@pytest.fixture
def other_client(client):
    """A second client sharing the database, with its own cookie jar."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def register(client, email="alice@example.com", full_name="Alice Author",
             password=DEFAULT_PASSWORD, **extra):
    """Register (and thereby sign in) a user. Returns the user payload."""
    response = client.post(
        "/api/auth/register",
        json={"email": email, "full_name": full_name, "password": password, **extra},
    )
    assert response.status_code == 201, response.text
    return response.json()


def login(client, email, password=DEFAULT_PASSWORD):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def create_article(client, title="Hello World", content="First post.", **extra):
    response = client.post(
        "/api/articles",
        json={"title": title, "content": content, **extra},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def alice(client):
    """Client signed in as Alice, plus her user payload."""
    return register(client)


@pytest.fixture
def bob(other_client):
    """Second client signed in as Bob, plus his user payload."""
    return register(other_client, email="bob@example.com", full_name="Bob Reader")


@pytest.fixture
def article(client, alice):
    """An article written by Alice."""
    return create_article(client, status="published", tags=["python", "sqlite"])
