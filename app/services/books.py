"""
Book Service

Catalog operations on the "books" collection.

Every operation takes the database handle first and raises APIError for
expected failures, so routers only translate results into envelopes.

Rules:
- create: a title that already exists is a conflict; a blank image gets
  the default cover
- update: replaces every mutable field; rating aggregates are untouched
- delete: removes the book and its reviews
- get/update/delete of an unknown or malformed id is not-found
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.config import get_settings
from app.database import BOOKS_COLLECTION, REVIEWS_COLLECTION
from app.exceptions import APIError
from app.models import Book, parse_object_id, utcnow
from app.schemas.book import BookCreate, BookUpdate

logger = logging.getLogger(__name__)

BOOK_NOT_FOUND = "Book not found"


def _image_or_default(image: str | None) -> str:
    return image or get_settings().default_book_image


async def create_book(db: AsyncIOMotorDatabase, data: BookCreate) -> Book:
    """
    Add a book to the catalog.

    The title check and the insert are two separate operations; two
    concurrent requests with the same new title can both succeed.

    Raises:
        APIError: 409 if a book with the same title exists
    """
    existing = await db[BOOKS_COLLECTION].find_one({"title": data.title})
    if existing is not None:
        raise APIError.conflict("Book already exists")

    book = Book(
        title=data.title,
        author=data.author,
        genre=data.genre,
        description=data.description,
        image=_image_or_default(data.image),
        price=data.price,
    )
    result = await db[BOOKS_COLLECTION].insert_one(book.to_mongo())
    book.id = result.inserted_id

    logger.info(f"Created book {book.id}: '{book.title}'")
    return book


async def update_book(db: AsyncIOMotorDatabase, book_id: str, data: BookUpdate) -> Book:
    """
    Overwrite all mutable fields of a book.

    Raises:
        APIError: 404 if the book does not exist
    """
    oid = parse_object_id(book_id)
    if oid is None:
        raise APIError.not_found(BOOK_NOT_FOUND)

    document = await db[BOOKS_COLLECTION].find_one_and_update(
        {"_id": oid},
        {
            "$set": {
                "title": data.title,
                "author": data.author,
                "genre": data.genre,
                "description": data.description,
                "image": _image_or_default(data.image),
                "price": data.price,
                "updated_at": utcnow(),
            }
        },
        return_document=ReturnDocument.AFTER,
    )
    if document is None:
        raise APIError.not_found(BOOK_NOT_FOUND)

    logger.info(f"Updated book {oid}")
    return Book.from_mongo(document)


async def delete_book(db: AsyncIOMotorDatabase, book_id: str) -> Book:
    """
    Delete a book and every review of it.

    Returns:
        The deleted book

    Raises:
        APIError: 404 if the book does not exist
    """
    oid = parse_object_id(book_id)
    if oid is None:
        raise APIError.not_found(BOOK_NOT_FOUND)

    document = await db[BOOKS_COLLECTION].find_one_and_delete({"_id": oid})
    if document is None:
        raise APIError.not_found(BOOK_NOT_FOUND)

    result = await db[REVIEWS_COLLECTION].delete_many({"book_id": oid})

    logger.info(f"Deleted book {oid} and {result.deleted_count} review(s)")
    return Book.from_mongo(document)


async def list_books(db: AsyncIOMotorDatabase) -> list[Book]:
    """Return every book in the catalog, unfiltered and unpaginated."""
    documents = await db[BOOKS_COLLECTION].find().to_list(length=None)
    return [Book.from_mongo(document) for document in documents]


async def get_book(db: AsyncIOMotorDatabase, book_id: str) -> Book:
    """
    Get a book by id.

    Raises:
        APIError: 404 if the book does not exist
    """
    oid = parse_object_id(book_id)
    if oid is None:
        raise APIError.not_found(BOOK_NOT_FOUND)

    document = await db[BOOKS_COLLECTION].find_one({"_id": oid})
    if document is None:
        raise APIError.not_found(BOOK_NOT_FOUND)
    return Book.from_mongo(document)
