"""
Review Service

Review operations on the "reviews" collection.

Business Rules:
- The reviewed book must exist
- One review per user per book
- Only the author can update a review
- The author or an admin can delete a review
- Every change recalculates the book's rating aggregates
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from app.database import BOOKS_COLLECTION, REVIEWS_COLLECTION
from app.exceptions import APIError
from app.models import Review, User, parse_object_id, utcnow
from app.schemas.review import ReviewCreate, ReviewUpdate
from app.services.ratings import recalculate_book_rating

logger = logging.getLogger(__name__)

REVIEW_NOT_FOUND = "Review not found"
NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


async def _find_reviews(db: AsyncIOMotorDatabase, query: dict) -> list[Review]:
    cursor = db[REVIEWS_COLLECTION].find(query, sort=NEWEST_FIRST)
    return [Review.from_mongo(document) for document in await cursor.to_list(length=None)]


async def _book_exists(db: AsyncIOMotorDatabase, book_id) -> bool:
    return await db[BOOKS_COLLECTION].find_one({"_id": book_id}, {"_id": 1}) is not None


async def create_review(db: AsyncIOMotorDatabase, user: User, data: ReviewCreate) -> Review:
    """
    Create a review of a book by the given user.

    Raises:
        APIError: 404 if the book does not exist
        APIError: 409 if the user already reviewed this book
    """
    book_oid = parse_object_id(data.book_id)
    if book_oid is None or not await _book_exists(db, book_oid):
        raise APIError.not_found("Book not found")

    existing = await db[REVIEWS_COLLECTION].find_one(
        {"book_id": book_oid, "user_id": user.id}
    )
    if existing is not None:
        raise APIError.conflict(
            "You have already reviewed this book. You can update your existing review."
        )

    review = Review(
        book_id=book_oid,
        user_id=user.id,
        rating=data.rating,
        review_text=data.review_text,
    )
    result = await db[REVIEWS_COLLECTION].insert_one(review.to_mongo())
    review.id = result.inserted_id

    await recalculate_book_rating(db, book_oid)

    logger.info(f"User {user.id} reviewed book {book_oid} ({review.rating}/5)")
    return review


async def list_reviews(db: AsyncIOMotorDatabase, book_id: str | None = None) -> list[Review]:
    """
    List reviews, newest first.

    Args:
        book_id: Restrict to one book when given

    Raises:
        APIError: 404 if book_id is given and the book does not exist
    """
    if book_id is None:
        return await _find_reviews(db, {})

    book_oid = parse_object_id(book_id)
    if book_oid is None or not await _book_exists(db, book_oid):
        raise APIError.not_found("Book not found")
    return await _find_reviews(db, {"book_id": book_oid})


async def list_user_reviews(db: AsyncIOMotorDatabase, user: User) -> list[Review]:
    """List the reviews written by a user, newest first."""
    return await _find_reviews(db, {"user_id": user.id})


async def get_review(db: AsyncIOMotorDatabase, review_id: str) -> Review:
    """
    Get a review by id.

    Raises:
        APIError: 404 if the review does not exist
    """
    oid = parse_object_id(review_id)
    if oid is None:
        raise APIError.not_found(REVIEW_NOT_FOUND)

    review = Review.from_mongo(await db[REVIEWS_COLLECTION].find_one({"_id": oid}))
    if review is None:
        raise APIError.not_found(REVIEW_NOT_FOUND)
    return review


async def update_review(
    db: AsyncIOMotorDatabase,
    review_id: str,
    user: User,
    data: ReviewUpdate,
) -> Review:
    """
    Replace the rating and text of a review.

    Raises:
        APIError: 404 if the review does not exist
        APIError: 403 if the user is not the author
    """
    review = await get_review(db, review_id)
    if review.user_id != user.id:
        raise APIError.forbidden("You can only update your own reviews")

    document = await db[REVIEWS_COLLECTION].find_one_and_update(
        {"_id": review.id},
        {
            "$set": {
                "rating": data.rating,
                "review_text": data.review_text,
                "updated_at": utcnow(),
            }
        },
        return_document=ReturnDocument.AFTER,
    )
    if document is None:
        raise APIError.not_found(REVIEW_NOT_FOUND)

    await recalculate_book_rating(db, review.book_id)

    logger.info(f"User {user.id} updated review {review.id}")
    return Review.from_mongo(document)


async def delete_review(db: AsyncIOMotorDatabase, review_id: str, user: User) -> Review:
    """
    Delete a review.

    Returns:
        The deleted review

    Raises:
        APIError: 404 if the review does not exist
        APIError: 403 if the user is neither the author nor an admin
    """
    review = await get_review(db, review_id)
    if review.user_id != user.id and not user.is_admin:
        raise APIError.forbidden("You can only delete your own reviews")

    await db[REVIEWS_COLLECTION].delete_one({"_id": review.id})
    await recalculate_book_rating(db, review.book_id)

    if review.user_id != user.id:
        logger.info(f"Admin {user.id} deleted review {review.id}")
    else:
        logger.info(f"User {user.id} deleted review {review.id}")
    return review
