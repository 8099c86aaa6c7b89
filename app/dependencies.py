"""
FastAPI Dependencies Module

Reusable components injected into route handlers with Depends().

- Database: the motor database handle
- CurrentUser / ActiveUser: the authenticated account

Authentication
==============
The access token is read from the "Authorization: Bearer <token>" header,
or, when that header is absent, from the access_token cookie set at login.
Browsers using the cookie never have to touch the token themselves.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_db
from app.exceptions import APIError
from app.models import User
from app.services.security import ACCESS_TOKEN_TYPE, verify_token_type
from app.services.users import get_user_by_id

ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   async def list_books(db: AsyncIOMotorDatabase = Depends(get_db)):
#
# You can write:
#   async def list_books(db: Database):

Database = Annotated[AsyncIOMotorDatabase, Depends(get_db)]


# =============================================================================
# JWT Authentication
# =============================================================================
# auto_error=False: a missing header falls through to the cookie instead of
# failing with FastAPI's own 403.
bearer_scheme = HTTPBearer(auto_error=False)


def get_access_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """Return the raw access token from the Bearer header or the cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


async def get_current_user(
    db: Database,
    token: str | None = Depends(get_access_token),
) -> User:
    """
    Extract and validate the current user from the access token.

    1. Decodes and validates the JWT (signature, expiry, type)
    2. Looks up the user in the database

    Raises:
        APIError: 401 if the token is missing or invalid, or the user no longer exists
    """
    if not token:
        raise APIError.unauthorized("Not authenticated")

    payload = verify_token_type(token, ACCESS_TOKEN_TYPE)
    if payload is None:
        raise APIError.unauthorized("Could not validate credentials")

    user_id = payload.get("sub")
    if user_id is None:
        raise APIError.unauthorized("Could not validate credentials")

    user = await get_user_by_id(db, user_id)
    if user is None:
        raise APIError.unauthorized("Could not validate credentials")

    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Verify the current user is active.

    Raises:
        APIError: 403 if the account is inactive
    """
    if not current_user.is_active:
        raise APIError.forbidden("Account is inactive")
    return current_user


CurrentUser = Annotated[User, Depends(get_current_user)]
ActiveUser = Annotated[User, Depends(get_current_active_user)]
