"""
Application Errors

APIError is the one exception type services raise for expected failures.
It carries the HTTP status to answer with and a message that is safe to
show to clients. The handler registered in app.main turns it into the
standard error envelope:

    {"message": "Book not found", "data": null, "isSuccess": false}

Usage:
    from app.exceptions import APIError

    if book is None:
        raise APIError.not_found("Book not found")
"""

from fastapi import status


class APIError(Exception):
    """An expected error with an HTTP status and a client-facing message."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __repr__(self) -> str:
        return f"APIError(status_code={self.status_code}, message={self.message!r})"

    @classmethod
    def bad_request(cls, message: str = "Bad request") -> "APIError":
        return cls(status.HTTP_400_BAD_REQUEST, message)

    @classmethod
    def unauthorized(cls, message: str = "Not authenticated") -> "APIError":
        return cls(status.HTTP_401_UNAUTHORIZED, message)

    @classmethod
    def forbidden(cls, message: str = "Forbidden") -> "APIError":
        return cls(status.HTTP_403_FORBIDDEN, message)

    @classmethod
    def not_found(cls, message: str = "Not found") -> "APIError":
        return cls(status.HTTP_404_NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str = "Conflict") -> "APIError":
        return cls(status.HTTP_409_CONFLICT, message)
