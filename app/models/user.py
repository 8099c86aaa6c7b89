"""
User Model

Represents a registered account. Stored in the "users" collection.

Indexes (created at startup):
- email: unique, used for login lookups
- username: unique

Example:
    user = User(
        email="john@example.com",
        username="johndoe",
        hashed_password=hash_password("SecurePass123"),
    )
"""

from datetime import datetime

from pydantic import Field

from app.models.base import MongoModel, utcnow


class User(MongoModel):
    """
    User document.

    Attributes:
        email: Login identifier
        username: Public handle, stored lowercase
        hashed_password: Bcrypt hash, never returned by the API
        full_name: Optional display name
        is_active: Inactive accounts cannot log in
        is_admin: Admins may moderate (delete) any review
        created_at: Registration time
        last_login_at: Last successful login
    """

    email: str
    username: str
    hashed_password: str
    full_name: str | None = None

    is_active: bool = True
    is_admin: bool = False

    created_at: datetime = Field(default_factory=utcnow)
    last_login_at: datetime | None = None

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
