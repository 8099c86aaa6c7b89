"""
Book Model

Represents a book in the catalog. Stored in the "books" collection.

Business Rules:
- Titles are unique at creation time (checked by the service, not an index)
- image falls back to the configured default when left blank
- average_rating and review_count are maintained by the ratings service
"""

from datetime import datetime

from pydantic import Field

from app.models.base import MongoModel, utcnow


class Book(MongoModel):
    """
    Book document.

    Attributes:
        title: Book title
        author: Author name, free text
        genre: Genre name, free text
        description: Summary, may be empty
        image: Cover image URL or path
        price: Price in the store currency
        average_rating: Mean review rating, None if there are no reviews
        review_count: Number of reviews
        created_at: When the book was added
        updated_at: When the book was last changed
    """

    title: str
    author: str
    genre: str
    description: str = ""
    image: str
    price: float

    average_rating: float | None = None
    review_count: int = 0

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}')>"
