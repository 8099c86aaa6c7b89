"""
Ratings Service

Maintains the denormalized rating fields on book documents:
- average_rating: The mean of all review ratings (None without reviews)
- review_count: Total number of reviews

These fields are recalculated whenever a review is created, updated, or
deleted, so book listings never need to aggregate reviews on read.
"""

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import BOOKS_COLLECTION, REVIEWS_COLLECTION
from app.exceptions import APIError
from app.models import parse_object_id
from app.schemas.review import BookRatingStats


async def _rating_distribution(db: AsyncIOMotorDatabase, book_id: ObjectId) -> dict[int, int]:
    """Count reviews per rating value for one book."""
    pipeline = [
        {"$match": {"book_id": book_id}},
        {"$group": {"_id": "$rating", "count": {"$sum": 1}}},
    ]
    distribution = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    for row in await db[REVIEWS_COLLECTION].aggregate(pipeline).to_list(length=None):
        distribution[int(row["_id"])] = row["count"]
    return distribution


def _average(distribution: dict[int, int]) -> float | None:
    total = sum(distribution.values())
    if total == 0:
        return None
    return round(sum(rating * count for rating, count in distribution.items()) / total, 2)


async def recalculate_book_rating(db: AsyncIOMotorDatabase, book_id: ObjectId) -> None:
    """
    Recalculate and store a book's rating aggregations.

    Called after any review create/update/delete operation.
    A missing book is ignored.
    """
    distribution = await _rating_distribution(db, book_id)
    await db[BOOKS_COLLECTION].update_one(
        {"_id": book_id},
        {
            "$set": {
                "average_rating": _average(distribution),
                "review_count": sum(distribution.values()),
            }
        },
    )


async def get_book_rating_stats(db: AsyncIOMotorDatabase, book_id: str) -> BookRatingStats:
    """
    Get rating statistics for a book.

    Returns:
        Average rating, total review count and the rating distribution

    Raises:
        APIError: 404 if the book does not exist
    """
    oid = parse_object_id(book_id)
    if oid is None or await db[BOOKS_COLLECTION].find_one({"_id": oid}) is None:
        raise APIError.not_found("Book not found")

    distribution = await _rating_distribution(db, oid)
    return BookRatingStats(
        book_id=str(oid),
        average_rating=_average(distribution) or 0.0,
        total_reviews=sum(distribution.values()),
        rating_distribution=distribution,
    )
