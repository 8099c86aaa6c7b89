"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Create a review for a book
- ReviewUpdate: Replace rating and text of an existing review
- ReviewResponse: Review data returned by the API
- BookRatingStats: Aggregated ratings for one book

Business Rules:
- Rating must be 1-5 (validated here)
- Review text must not be blank (validated here)
- One review per user per book (enforced by the service)
"""

from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from app.models import Review
from app.schemas.base import ApiSchema, ObjectIdStr


class ReviewBase(ApiSchema):
    """Shared review fields."""

    rating: int = Field(
        ...,
        strict=True,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    review_text: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Review text",
        examples=["One of the best books I've ever read."],
    )

    @field_validator("review_text")
    @classmethod
    def review_text_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Review text cannot be empty")
        return v.strip()


class ReviewCreate(ReviewBase):
    """
    Schema for creating a review.

    Example request body:
    {
        "bookId": "665f1c2e8b3e4a0b9c1d2e3f",
        "rating": 5,
        "reviewText": "Amazing book!"
    }
    """

    book_id: str = Field(..., description="ID of the book being reviewed")


class ReviewUpdate(ReviewBase):
    """Schema for updating a review. Rating and text are both replaced."""

    pass


class ReviewResponse(ReviewBase):
    """Schema for review responses."""

    id: ObjectIdStr = Field(..., alias="_id", description="Unique review identifier")
    book_id: ObjectIdStr = Field(..., description="ID of the reviewed book")
    user_id: ObjectIdStr = Field(..., description="ID of the user who wrote the review")
    created_at: datetime = Field(..., description="When the review was created")
    updated_at: datetime = Field(..., description="When the review was last updated")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "_id": "665f1d0a8b3e4a0b9c1d2e40",
                "bookId": "665f1c2e8b3e4a0b9c1d2e3f",
                "userId": "665f1b998b3e4a0b9c1d2e3a",
                "rating": 5,
                "reviewText": "A must-read classic!",
                "createdAt": "2024-01-15T10:30:00Z",
                "updatedAt": "2024-01-15T10:30:00Z",
            }
        },
    )

    @classmethod
    def from_model(cls, review: Review) -> "ReviewResponse":
        return cls.model_validate(review.model_dump())


class BookRatingStats(ApiSchema):
    """
    Aggregated rating statistics for a book.

    average_rating is 0 when the book has no reviews.
    """

    book_id: str = Field(..., description="Book ID")
    average_rating: float = Field(
        ...,
        ge=0,
        le=5,
        description="Average rating (0-5, 0 means no reviews)",
    )
    total_reviews: int = Field(..., ge=0, description="Total number of reviews")
    rating_distribution: dict[int, int] = Field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
        description="Count of each rating (1-5)",
    )
