"""
Reviews Router

CRUD endpoints for book reviews.

Endpoints:
- GET /reviews - List reviews, optionally for one book (?bookId=)
- GET /reviews/me - Reviews written by the current user
- GET /reviews/book/{book_id}/rating - Book rating statistics
- GET /reviews/{review_id} - Get a specific review
- POST /reviews - Create a review (authenticated)
- PUT /reviews/{review_id} - Update a review (author only)
- DELETE /reviews/{review_id} - Delete a review (author or admin)

Business Rules:
- One review per user per book
- Only the review author can update their review
- Only the review author or an admin can delete a review

The fixed paths (/me, /book/...) are declared before /{review_id} so they
are matched first.
"""

from fastapi import APIRouter, Query, Request, status

from app.config import get_settings
from app.dependencies import ActiveUser, Database
from app.schemas import (
    BookRatingStats,
    Envelope,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
    success_response,
)
from app.services import reviews as review_service
from app.services.rate_limiter import limiter
from app.services.ratings import get_book_rating_stats

settings = get_settings()

router = APIRouter(
    prefix="/reviews",
    tags=["Reviews"],
    responses={
        404: {"description": "Review or book not found"},
    },
)


def _to_responses(reviews) -> list[ReviewResponse]:
    return [ReviewResponse.from_model(review) for review in reviews]


@router.get(
    "",
    response_model=Envelope[list[ReviewResponse]],
    summary="List reviews",
    description="List reviews newest first. Pass `bookId` to restrict to one book.",
)
async def list_reviews(
    db: Database,
    book_id: str | None = Query(default=None, alias="bookId", description="Book to filter by"),
) -> dict:
    reviews = await review_service.list_reviews(db, book_id)
    return success_response("Reviews fetched successfully", _to_responses(reviews))


@router.get(
    "/me",
    response_model=Envelope[list[ReviewResponse]],
    summary="Get my reviews",
)
async def list_my_reviews(db: Database, current_user: ActiveUser) -> dict:
    reviews = await review_service.list_user_reviews(db, current_user)
    return success_response("Reviews fetched successfully", _to_responses(reviews))


@router.get(
    "/book/{book_id}/rating",
    response_model=Envelope[BookRatingStats],
    summary="Get book rating statistics",
    description="Average rating, review count and the 1-5 star distribution for a book.",
)
async def get_rating_stats(book_id: str, db: Database) -> dict:
    stats = await get_book_rating_stats(db, book_id)
    return success_response("Rating statistics fetched successfully", stats)


@router.get(
    "/{review_id}",
    response_model=Envelope[ReviewResponse],
    summary="Get a review",
)
async def get_review(review_id: str, db: Database) -> dict:
    review = await review_service.get_review(db, review_id)
    return success_response("Review fetched successfully", ReviewResponse.from_model(review))


@router.post(
    "",
    response_model=Envelope[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="""
    Review a book. Each user can review a book once; edit the existing
    review instead of posting a second one.
    """,
    responses={409: {"description": "User already reviewed this book"}},
)
@limiter.limit(settings.rate_limit_write)
async def create_review(
    request: Request,
    review_data: ReviewCreate,
    db: Database,
    current_user: ActiveUser,
) -> dict:
    review = await review_service.create_review(db, current_user, review_data)
    return success_response("Review created successfully", ReviewResponse.from_model(review))


@router.put(
    "/{review_id}",
    response_model=Envelope[ReviewResponse],
    summary="Update a review",
    responses={403: {"description": "Not the review author"}},
)
@limiter.limit(settings.rate_limit_write)
async def update_review(
    request: Request,
    review_id: str,
    review_data: ReviewUpdate,
    db: Database,
    current_user: ActiveUser,
) -> dict:
    review = await review_service.update_review(db, review_id, current_user, review_data)
    return success_response("Review updated successfully", ReviewResponse.from_model(review))


@router.delete(
    "/{review_id}",
    response_model=Envelope[ReviewResponse],
    summary="Delete a review",
    responses={403: {"description": "Not the review author or an admin"}},
)
@limiter.limit(settings.rate_limit_write)
async def delete_review(
    request: Request,
    review_id: str,
    db: Database,
    current_user: ActiveUser,
) -> dict:
    review = await review_service.delete_review(db, review_id, current_user)
    return success_response("Review deleted successfully", ReviewResponse.from_model(review))
