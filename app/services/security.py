"""
Security Service

Password hashing (passlib/bcrypt) and JWT handling (python-jose).

Tokens
======
Two HS256 tokens are issued at login, both with the user id in "sub":
- access:  short-lived, sent as a Bearer header or the access_token cookie
- refresh: long-lived, exchanged at /api/auth/refresh for a new access token

A "type" claim keeps one from being used in place of the other.

Usage:
    from app.services.security import hash_password, verify_password

    hashed = hash_password("SecurePass123")
    verify_password("SecurePass123", hashed)  # True
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# -------------------------------------------------------------------------
# Passwords
# -------------------------------------------------------------------------
def hash_password(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a bcrypt hash.

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# JWT Tokens
# -------------------------------------------------------------------------
def _encode(data: dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(UTC) + expires_delta, "type": token_type})
    return jwt.encode(to_encode, get_settings().secret_key, algorithm=ALGORITHM)


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode in the token, usually {"sub": user_id}
        expires_delta: Optional custom lifetime; defaults to
            settings.access_token_expire_minutes

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=get_settings().access_token_expire_minutes)
    return _encode(data, ACCESS_TOKEN_TYPE, expires_delta)


def create_refresh_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT refresh token (longer-lived than the access token).

    Args:
        data: Payload data to encode in the token
        expires_delta: Optional custom lifetime; defaults to
            settings.refresh_token_expire_days

    Returns:
        Encoded JWT refresh token string
    """
    if expires_delta is None:
        expires_delta = timedelta(days=get_settings().refresh_token_expire_days)
    return _encode(data, REFRESH_TOKEN_TYPE, expires_delta)


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def verify_token_type(token: str, expected_type: str) -> dict[str, Any] | None:
    """
    Decode a token and verify its type.

    Args:
        token: The JWT token string
        expected_type: "access" or "refresh"

    Returns:
        Decoded payload if valid and of the expected type, None otherwise
    """
    payload = decode_token(token)

    if payload is None:
        return None

    if payload.get("type") != expected_type:
        logger.warning(f"Token type mismatch: expected {expected_type}")
        return None

    return payload
