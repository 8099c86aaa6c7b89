"""
Database Configuration Module

Sets up the async MongoDB connection (motor) for the Book Review API.

Collections
===========
- books:   the book catalog
- reviews: one document per (user, book) review
- users:   registered accounts

Connection Management
=====================
A single AsyncIOMotorClient is shared by the whole process. It is created
lazily on first use and closed in the application's shutdown hook. Motor
keeps its own connection pool, so handing the same database object to every
request is safe.

Route handlers receive the database through FastAPI's dependency injection:

    from app.dependencies import Database

    @router.get("/books")
    async def list_books(db: Database):
        ...
"""

import logging
from collections.abc import AsyncGenerator

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from app.config import get_settings

logger = logging.getLogger(__name__)

BOOKS_COLLECTION = "books"
REVIEWS_COLLECTION = "reviews"
USERS_COLLECTION = "users"

_client: AsyncIOMotorClient | None = None


# =============================================================================
# Client Lifecycle
# =============================================================================
def get_client() -> AsyncIOMotorClient:
    """
    Return the process-wide motor client, creating it on first call.

    Creating the client does not open a connection; motor connects
    on the first operation.
    """
    global _client
    if _client is None:
        settings = get_settings()
        _client = AsyncIOMotorClient(settings.mongo_url)
        logger.debug("Created MongoDB client")
    return _client


def get_database() -> AsyncIOMotorDatabase:
    """Return the application database on the shared client."""
    return get_client()[get_settings().mongo_db_name]


def close_client() -> None:
    """Close the shared client. The next get_client() call reconnects."""
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB connection closed")


# =============================================================================
# Dependency Injection
# =============================================================================
async def get_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    Database dependency for FastAPI.

    Yields:
        The application AsyncIOMotorDatabase
    """
    yield get_database()


# =============================================================================
# Indexes
# =============================================================================
async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Create the indexes the services rely on.

    - users.email and users.username are unique
    - books.title speeds up the duplicate-title check on create
    - reviews are looked up by book and by author

    create_index is idempotent, so this runs on every startup.
    """
    await db[USERS_COLLECTION].create_index("email", unique=True)
    await db[USERS_COLLECTION].create_index("username", unique=True)
    await db[BOOKS_COLLECTION].create_index("title")
    await db[REVIEWS_COLLECTION].create_index(
        [("book_id", ASCENDING), ("created_at", DESCENDING)]
    )
    await db[REVIEWS_COLLECTION].create_index(
        [("user_id", ASCENDING), ("book_id", ASCENDING)]
    )
    logger.info("MongoDB indexes ensured")


async def ping(db: AsyncIOMotorDatabase) -> bool:
    """Return True if the server answers a ping."""
    result = await db.command("ping")
    return bool(result.get("ok"))
