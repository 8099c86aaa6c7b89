"""
Response Envelope

Every response body, success or failure, has the same three keys:

    {
        "message": "Book created successfully",
        "data": {...} | [...] | null,
        "isSuccess": true
    }

Routers declare `response_model=Envelope[BookResponse]` and return the
dict built by success_response(); the exception handlers in app.main use
error_response().
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Uniform JSON wrapper around every API payload."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="Human-readable outcome")
    data: T | None = Field(default=None, description="Payload, null on errors")
    is_success: bool = Field(
        ...,
        alias="isSuccess",
        description="True for 2xx responses",
    )


def success_response(message: str, data: Any = None) -> dict[str, Any]:
    """Build a success envelope."""
    return {"message": message, "data": data, "isSuccess": True}


def error_response(message: str, data: Any = None) -> dict[str, Any]:
    """Build an error envelope. data stays null except for validation details."""
    return {"message": message, "data": data, "isSuccess": False}
