"""
Pydantic Schemas Package

Request/response validation for the API, kept separate from the document
models in app.models so the wire format can differ from what is stored.

Schema Naming Convention:
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields accepted when updating
- XxxResponse: Fields returned in API responses
- Envelope[T]: The {message, data, isSuccess} wrapper around all of them
"""

from app.schemas.envelope import Envelope, error_response, success_response
from app.schemas.book import (
    BookBase,
    BookCreate,
    BookResponse,
    BookUpdate,
)
from app.schemas.review import (
    BookRatingStats,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
)
from app.schemas.user import (
    LoginRequest,
    RefreshTokenRequest,
    TokenResponse,
    UserCreate,
    UserResponse,
)

__all__ = [
    # Envelope
    "Envelope",
    "success_response",
    "error_response",
    # Book schemas
    "BookBase",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "BookRatingStats",
    # User/Auth schemas
    "UserCreate",
    "UserResponse",
    "LoginRequest",
    "TokenResponse",
    "RefreshTokenRequest",
]
