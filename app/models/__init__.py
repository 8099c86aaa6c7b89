"""
Document Models Package

Pydantic models mirroring the MongoDB documents of each collection.

- Book   -> "books"
- Review -> "reviews" (references a book and a user by ObjectId)
- User   -> "users"

Usage:
    from app.models import Book, Review, User
"""

from app.models.base import MongoModel, parse_object_id, utcnow
from app.models.book import Book
from app.models.review import Review
from app.models.user import User

__all__ = [
    "MongoModel",
    "parse_object_id",
    "utcnow",
    "Book",
    "Review",
    "User",
]
