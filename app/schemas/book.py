"""
Book Pydantic Schemas

Handles:
- Required, trimmed text fields (title, author, genre)
- Optional image (the service substitutes the default cover)
- Price validation, numeric strings accepted

Example request body:
{
    "title": "Dune",
    "author": "Frank Herbert",
    "genre": "Science Fiction",
    "description": "Desert planet, spice, prophecy.",
    "image": "https://example.com/dune.jpg",
    "price": 18.5
}
"""

from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from app.models import Book
from app.schemas.base import ApiSchema, ObjectIdStr


class BookBase(ApiSchema):
    """
    Base schema with shared book fields.

    Contains validation for:
    - title/author/genre must not be blank
    - price must be zero or positive
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title, unique in the catalog",
        examples=["Dune", "Rich Dad Poor Dad"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Author name",
        examples=["Frank Herbert"],
    )

    genre: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Genre name",
        examples=["Science Fiction", "Personal Finance"],
    )

    description: str = Field(
        default="",
        max_length=5000,
        description="Book description or summary",
    )

    image: str | None = Field(
        default=None,
        max_length=2000,
        description="Cover image URL or path; the default cover is used when blank",
    )

    price: float = Field(
        ...,
        ge=0,
        le=1_000_000,
        allow_inf_nan=False,
        description="Book price",
        examples=[18.5, 9.99],
    )

    @field_validator("title", "author", "genre")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        """Trim and reject whitespace-only values."""
        if not v.strip():
            raise ValueError("must not be empty or whitespace")
        return v.strip()

    @field_validator("price", mode="before")
    @classmethod
    def price_must_be_numeric(cls, v):
        """Numeric strings are coerced; booleans are not prices."""
        if isinstance(v, bool):
            raise ValueError("price must be a number")
        return v

    @field_validator("image")
    @classmethod
    def blank_image_is_none(cls, v: str | None) -> str | None:
        """Treat an empty image field as not provided."""
        if v is None or not v.strip():
            return None
        return v.strip()


class BookCreate(BookBase):
    """Schema for creating a new book."""

    pass


class BookUpdate(BookBase):
    """
    Schema for updating a book.

    Updates replace every mutable field, so the same fields as BookCreate
    are required. There is no partial (PATCH-style) merge.
    """

    pass


class BookResponse(BookBase):
    """
    Schema for book responses.

    Adds the document id, rating aggregates and timestamps.
    """

    id: ObjectIdStr = Field(..., alias="_id", description="Unique identifier")
    image: str = Field(..., description="Cover image URL or path")
    average_rating: float | None = Field(
        default=None,
        description="Average review rating (1.00-5.00), null if no reviews",
    )
    review_count: int = Field(default=0, description="Number of reviews")
    created_at: datetime = Field(..., description="When the book was created")
    updated_at: datetime = Field(..., description="When the book was last updated")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "_id": "665f1c2e8b3e4a0b9c1d2e3f",
                "title": "Dune",
                "author": "Frank Herbert",
                "genre": "Science Fiction",
                "description": "Desert planet, spice, prophecy.",
                "image": "/rich and poor dad.jpg",
                "price": 18.5,
                "averageRating": 4.5,
                "reviewCount": 2,
                "createdAt": "2024-01-15T10:30:00Z",
                "updatedAt": "2024-01-15T10:30:00Z",
            }
        },
    )

    @classmethod
    def from_model(cls, book: Book) -> "BookResponse":
        return cls.model_validate(book.model_dump())
