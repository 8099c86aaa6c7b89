"""
User Pydantic Schemas

Schemas:
- UserCreate: Registration data (email, username, password)
- LoginRequest: Email/password credentials
- UserResponse: Account data returned by the API (never the password hash)
- TokenResponse: Tokens issued at login/refresh
- RefreshTokenRequest: Refresh token passed in the body instead of a cookie
"""

import re
from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field, field_validator

from app.models import User
from app.schemas.base import ApiSchema, ObjectIdStr


def _check_password_strength(v: str) -> str:
    if not re.search(r"[A-Z]", v):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", v):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r"\d", v):
        raise ValueError("Password must contain at least one number")
    return v


class UserCreate(ApiSchema):
    """
    Schema for user registration.

    Example request body:
    {
        "email": "john@example.com",
        "username": "johndoe",
        "password": "SecurePass123",
        "fullName": "John Doe"
    }
    """

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["john@example.com"],
    )

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        description="Unique username (3-50 characters, alphanumeric and underscores)",
        examples=["johndoe", "jane_doe123"],
    )

    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password (min 8 chars, must include uppercase, lowercase and a number)",
        examples=["SecurePass123"],
    )

    full_name: str | None = Field(
        default=None,
        max_length=255,
        description="User's full display name",
        examples=["John Doe"],
    )

    @field_validator("username")
    @classmethod
    def username_must_be_valid(cls, v: str) -> str:
        """
        Validate username format.

        Rules:
        - Only alphanumeric and underscores
        - Must start with a letter
        - Stored lowercase
        """
        if not re.match(r"^[a-zA-Z][a-zA-Z0-9_]*$", v):
            raise ValueError(
                "Username must start with a letter and contain only "
                "letters, numbers, and underscores"
            )
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, v: str) -> str:
        return _check_password_strength(v)


class LoginRequest(ApiSchema):
    """Email/password login credentials."""

    email: EmailStr = Field(..., description="Registered email address")
    password: str = Field(..., min_length=1, description="Account password")


class UserResponse(ApiSchema):
    """
    Schema for user responses.

    SECURITY: Never includes the password hash.
    """

    id: ObjectIdStr = Field(..., alias="_id", description="Unique user identifier")
    email: EmailStr = Field(..., description="User's email address")
    username: str = Field(..., description="Unique username")
    full_name: str | None = Field(default=None, description="User's full display name")
    is_active: bool = Field(..., description="Whether the account is active")
    is_admin: bool = Field(..., description="Whether the user can moderate reviews")
    created_at: datetime = Field(..., description="When the user registered")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "_id": "665f1b998b3e4a0b9c1d2e3a",
                "email": "john@example.com",
                "username": "johndoe",
                "fullName": "John Doe",
                "isActive": True,
                "isAdmin": False,
                "createdAt": "2024-01-15T10:30:00Z",
            }
        },
    )

    @classmethod
    def from_model(cls, user: User) -> "UserResponse":
        return cls.model_validate(user.model_dump(exclude={"hashed_password"}))


class TokenResponse(ApiSchema):
    """
    Tokens issued by /auth/login and /auth/refresh.

    The same access token is also set as an httpOnly cookie.
    """

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Always 'bearer'")
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    user: UserResponse = Field(..., description="The authenticated user")


class RefreshTokenRequest(ApiSchema):
    """Refresh token in the request body (the cookie is used otherwise)."""

    refresh_token: str | None = Field(default=None, description="JWT refresh token")
