"""
pytest Fixtures for Book Review API Tests

Shared fixtures used across all test files.

DATABASE:
=========
mongomock-motor provides an in-memory client with the motor API. A fresh
client is patched into app.database for every test, so the lifespan hooks,
the get_db dependency and the fixtures below all see the same store, and
no test sees another test's data.

Fixtures that need data call the services directly (through run()), the
same way the routers do.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting and sets a test secret key
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"

import asyncio
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app import database
from app.config import get_settings
from app.database import USERS_COLLECTION
from app.main import app
from app.models import Book, Review, User
from app.schemas import BookCreate, ReviewCreate, UserCreate
from app.services.books import create_book
from app.services.reviews import create_review
from app.services.security import create_access_token, hash_password
from app.services.users import register_user


def run(coro):
    """Run a coroutine from a sync fixture or test."""
    return asyncio.run(coro)


def auth_header(user: User) -> dict:
    """Create an authorization header for a user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def mongo_client(monkeypatch: pytest.MonkeyPatch) -> AsyncMongoMockClient:
    """Fresh in-memory MongoDB client, installed as the application client."""
    mock_client = AsyncMongoMockClient()
    monkeypatch.setattr(database, "_client", mock_client)
    return mock_client


@pytest.fixture
def db(mongo_client: AsyncMongoMockClient):
    """The application database on the in-memory client."""
    return mongo_client[get_settings().mongo_db_name]


@pytest.fixture
def client(db) -> Generator[TestClient, None, None]:
    """
    Create a test client backed by the in-memory database.

    Entering the context runs the lifespan (index creation).
    """
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_user(db) -> User:
    """Create a sample user for testing."""
    return run(register_user(db, UserCreate(
        email="testuser@example.com",
        username="testuser",
        password="SecurePass123",
        full_name="Test User",
    )))


@pytest.fixture
def second_user(db) -> User:
    """Create a second user for testing ownership scenarios."""
    return run(register_user(db, UserCreate(
        email="seconduser@example.com",
        username="seconduser",
        password="SecurePass456",
        full_name="Second User",
    )))


@pytest.fixture
def admin_user(db) -> User:
    """Create an admin for testing moderation scenarios."""
    user = User(
        email="admin@example.com",
        username="admin",
        hashed_password=hash_password("AdminPass123"),
        full_name="Admin User",
        is_admin=True,
    )
    result = run(db[USERS_COLLECTION].insert_one(user.to_mongo()))
    user.id = result.inserted_id
    return user


@pytest.fixture
def inactive_user(db) -> User:
    """Create a deactivated account."""
    user = User(
        email="inactive@example.com",
        username="inactive",
        hashed_password=hash_password("InactivePass123"),
        is_active=False,
    )
    result = run(db[USERS_COLLECTION].insert_one(user.to_mongo()))
    user.id = result.inserted_id
    return user


@pytest.fixture
def sample_book(db) -> Book:
    """Create a sample book for testing."""
    return run(create_book(db, BookCreate(
        title="Rich Dad Poor Dad",
        author="Robert Kiyosaki",
        genre="Finance",
        description="What the rich teach their kids about money.",
        image="/rich and poor dad.jpg",
        price=15.99,
    )))


@pytest.fixture
def sample_review(db, sample_book: Book, sample_user: User) -> Review:
    """Create a sample review of sample_book by sample_user."""
    return run(create_review(db, sample_user, ReviewCreate(
        book_id=str(sample_book.id),
        rating=4,
        review_text="I really enjoyed reading this book.",
    )))


@pytest.fixture
def book_payload() -> dict:
    """A valid create/update request body."""
    return {
        "title": "Dune",
        "author": "Frank Herbert",
        "genre": "Science Fiction",
        "description": "Desert planet politics.",
        "image": "/dune.jpg",
        "price": 9.99,
    }
