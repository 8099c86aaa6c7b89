"""
Authentication Router

Handles user authentication endpoints:
- Registration (email/password)
- Login (email/password → JWT tokens)
- Token refresh (refresh token → new access token)
- Logout (clears the auth cookies)
- Get current user (from JWT token)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- Both tokens are also set as httpOnly cookies for browser clients
- Access tokens are short-lived, refresh tokens are longer-lived
"""

import logging

from fastapi import APIRouter, Request, Response, status

from app.config import get_settings
from app.dependencies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    ActiveUser,
    CurrentUser,
    Database,
)
from app.exceptions import APIError
from app.models import User
from app.schemas import (
    Envelope,
    LoginRequest,
    RefreshTokenRequest,
    TokenResponse,
    UserCreate,
    UserResponse,
    success_response,
)
from app.services.rate_limiter import limiter
from app.services.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    verify_token_type,
)
from app.services.users import authenticate_user, get_user_by_id, register_user

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Unauthorized"},
        409: {"description": "Conflict (email/username already exists)"},
    },
)


def _set_auth_cookie(response: Response, key: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key=key,
        value=value,
        httponly=True,  # Not accessible via JavaScript
        secure=settings.is_production,  # HTTPS only in production
        samesite="lax",
        max_age=max_age,
    )


def _token_response(response: Response, user: User) -> TokenResponse:
    """Issue a fresh access token for the user and set it as a cookie."""
    expires_in = settings.access_token_expire_minutes * 60
    access_token = create_access_token({"sub": str(user.id)})
    _set_auth_cookie(response, ACCESS_TOKEN_COOKIE, access_token, expires_in)

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=expires_in,
        user=UserResponse.from_model(user),
    )


# -------------------------------------------------------------------------
# Registration Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/register",
    response_model=Envelope[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new user account with email and password.

    **Password Requirements:**
    - Minimum 8 characters
    - At least 1 uppercase letter
    - At least 1 lowercase letter
    - At least 1 number

    **Username Requirements:**
    - 3-50 characters
    - Must start with a letter
    - Only letters, numbers, and underscores
    """,
)
@limiter.limit(settings.rate_limit_auth)
async def register(request: Request, user_data: UserCreate, db: Database) -> dict:
    user = await register_user(db, user_data)
    return success_response("User registered successfully", UserResponse.from_model(user))


# -------------------------------------------------------------------------
# Login Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/login",
    response_model=Envelope[TokenResponse],
    summary="Login with email and password",
    description="""
    Authenticate with email and password to receive JWT tokens.

    The access token is returned in the body and set as the `access_token`
    httpOnly cookie; the refresh token is set as the `refresh_token` cookie.

    **Usage:**
    ```
    Authorization: Bearer <access_token>
    ```
    """,
)
@limiter.limit(settings.rate_limit_auth)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: Database,
) -> dict:
    user = await authenticate_user(db, credentials.email, credentials.password)

    refresh_token = create_refresh_token({"sub": str(user.id)})
    _set_auth_cookie(
        response,
        REFRESH_TOKEN_COOKIE,
        refresh_token,
        settings.refresh_token_expire_days * 24 * 60 * 60,
    )

    return success_response("Login successful", _token_response(response, user))


# -------------------------------------------------------------------------
# Token Refresh Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/refresh",
    response_model=Envelope[TokenResponse],
    summary="Refresh access token",
    description="""
    Get a new access token using a refresh token.

    **Methods:**
    1. **Body**: Pass refreshToken in the request body
    2. **Cookie**: Refresh token from the httpOnly cookie (automatic)
    """,
)
async def refresh_token(
    request: Request,
    response: Response,
    db: Database,
    body: RefreshTokenRequest | None = None,
) -> dict:
    token = body.refresh_token if body and body.refresh_token else None
    if token is None:
        token = request.cookies.get(REFRESH_TOKEN_COOKIE)

    if not token:
        raise APIError.unauthorized("Refresh token required")

    payload = verify_token_type(token, REFRESH_TOKEN_TYPE)
    if payload is None or not payload.get("sub"):
        raise APIError.unauthorized("Invalid or expired refresh token")

    user = await get_user_by_id(db, payload["sub"])
    if user is None:
        raise APIError.unauthorized("User not found")

    if not user.is_active:
        raise APIError.forbidden("Account is inactive")

    logger.info(f"Token refreshed for user: {user.email}")

    return success_response("Token refreshed successfully", _token_response(response, user))


# -------------------------------------------------------------------------
# Logout Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/logout",
    response_model=Envelope[None],
    summary="Logout",
)
async def logout(response: Response, current_user: CurrentUser) -> dict:
    """Clear the auth cookies. Tokens are stateless and expire on their own."""
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    response.delete_cookie(REFRESH_TOKEN_COOKIE)

    logger.info(f"User logged out: {current_user.email}")

    return success_response("Logged out successfully")


# -------------------------------------------------------------------------
# Current User Endpoint
# -------------------------------------------------------------------------
@router.get(
    "/me",
    response_model=Envelope[UserResponse],
    summary="Get current user",
)
async def get_me(current_user: ActiveUser) -> dict:
    return success_response("User fetched successfully", UserResponse.from_model(current_user))
