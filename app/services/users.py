"""
User Service

Account operations on the "users" collection: registration, credential
checks and lookups used by the authentication dependencies.

Security:
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
"""

import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from app.database import USERS_COLLECTION
from app.exceptions import APIError
from app.models import User, parse_object_id, utcnow
from app.schemas.user import UserCreate
from app.services.security import hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Incorrect email or password"


async def register_user(db: AsyncIOMotorDatabase, data: UserCreate) -> User:
    """
    Register a new user with email and password.

    Raises:
        APIError: 409 if the email or username is already in use
    """
    if await db[USERS_COLLECTION].find_one({"email": data.email}) is not None:
        raise APIError.conflict("Email already registered")

    if await db[USERS_COLLECTION].find_one({"username": data.username}) is not None:
        raise APIError.conflict("Username already taken")

    user = User(
        email=data.email,
        username=data.username,
        hashed_password=hash_password(data.password),
        full_name=data.full_name,
    )
    try:
        result = await db[USERS_COLLECTION].insert_one(user.to_mongo())
    except DuplicateKeyError as exc:
        # Lost a race with a concurrent registration; the unique index caught it.
        raise APIError.conflict("Email or username already registered") from exc
    user.id = result.inserted_id

    logger.info(f"New user registered: {user.email}")
    return user


async def authenticate_user(db: AsyncIOMotorDatabase, email: str, password: str) -> User:
    """
    Check credentials and record the login.

    Raises:
        APIError: 401 if the email is unknown or the password is wrong
        APIError: 403 if the account is inactive
    """
    user = User.from_mongo(await db[USERS_COLLECTION].find_one({"email": email}))

    if user is None:
        logger.warning(f"Login failed: user not found for {email}")
        raise APIError.unauthorized(INVALID_CREDENTIALS)

    if not verify_password(password, user.hashed_password):
        logger.warning(f"Login failed: incorrect password for {email}")
        raise APIError.unauthorized(INVALID_CREDENTIALS)

    if not user.is_active:
        logger.warning(f"Login failed: inactive account {email}")
        raise APIError.forbidden("Account is inactive")

    user.last_login_at = utcnow()
    await db[USERS_COLLECTION].update_one(
        {"_id": user.id},
        {"$set": {"last_login_at": user.last_login_at}},
    )

    logger.info(f"User logged in: {user.email}")
    return user


async def get_user_by_id(db: AsyncIOMotorDatabase, user_id: str) -> User | None:
    """Look up a user by id; None if the id is malformed or unknown."""
    oid = parse_object_id(user_id)
    if oid is None:
        return None
    return User.from_mongo(await db[USERS_COLLECTION].find_one({"_id": oid}))
