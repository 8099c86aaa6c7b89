"""
Review Model

Represents a user's review of a book. Stored in the "reviews" collection.

Business Rules:
- One review per user per book
- Rating must be 1-5
- Users can only edit their own reviews
- Admins can delete any review (moderation)
"""

from datetime import datetime

from bson import ObjectId
from pydantic import Field

from app.models.base import MongoModel, utcnow


class Review(MongoModel):
    """
    Review document.

    Attributes:
        book_id: Reviewed book
        user_id: Author of the review
        rating: 1-5 star rating
        review_text: Review body
        created_at: When the review was written
        updated_at: When the review was last edited
    """

    book_id: ObjectId
    user_id: ObjectId
    rating: int
    review_text: str

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, book_id={self.book_id}, rating={self.rating})>"
