"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app
   - Tests build their own instances with the same wiring

2. Lifespan Events
   - startup: ensure MongoDB indexes
   - shutdown: close the motor client

3. Middleware Stack
   - CORS: the frontend origins, with credentials (auth cookies)
   - Rate limiting: slowapi

4. Exception Handlers
   - Every error leaves as {"message", "data", "isSuccess": false}
   - Unexpected errors are logged and answered with a generic 500
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.database import close_client, create_indexes, get_database, ping
from app.exceptions import APIError
from app.routers import auth_router, books_router, reviews_router
from app.schemas import Envelope, error_response, success_response
from app.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"
DATABASE_ERROR_MESSAGE = "A database error occurred. Please try again later."


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield runs on startup, code after yield on shutdown.
    An unreachable database is logged, not fatal: requests that need it
    fail individually until it comes back.
    """
    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"API version: {settings.api_version}")

    try:
        await create_indexes(get_database())
    except PyMongoError as exc:
        logger.warning(f"MongoDB unavailable at startup, indexes not ensured: {exc}")

    yield

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")
    close_client()


def _validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors to [{"field": "price", "message": "..."}]."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        if location and location[0] in ("body", "query", "path", "header", "cookie"):
            location = location[1:]
        errors.append({
            "field": ".".join(location) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return errors


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Book Review API

Backend for the Book Review App.

### Features
- **Books**: Catalog CRUD
- **Reviews**: One review per user per book, with rating statistics
- **Auth**: Registration, login and JWT tokens (Bearer header or cookie)

### Responses
Every body is an envelope: `{"message", "data", "isSuccess"}`.
        """,
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    # The decorators look the limiter up on app.state
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        # Cookies carry the auth tokens
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        """Expected failures raised by services and dependencies."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Framework errors such as unknown routes and wrong methods."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_response("Validation failed", _validation_errors(exc)),
        )

    @app.exception_handler(PyMongoError)
    async def database_exception_handler(
        request: Request,
        exc: PyMongoError,
    ) -> JSONResponse:
        """
        Handle MongoDB driver errors.

        Logs the actual error for debugging while hiding details from users.
        """
        logger.error(f"Database error: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response(DATABASE_ERROR_MESSAGE),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all. Internals never reach the client, debug mode included."""
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response(INTERNAL_ERROR_MESSAGE),
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(auth_router, prefix="/api")
    app.include_router(books_router, prefix="/api")
    app.include_router(reviews_router, prefix="/api")

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and the database answers.",
    )
    async def health_check() -> dict:
        """
        Health check endpoint.

        Used by load balancers and monitoring. Always answers 200; the
        database state is reported in the payload.
        """
        try:
            database_ok = await ping(get_database())
        except PyMongoError as exc:
            logger.warning(f"Health check ping failed: {exc}")
            database_ok = False

        return success_response(
            "Service is healthy" if database_ok else "Service is degraded",
            {
                "app": settings.app_name,
                "version": settings.api_version,
                "database": "connected" if database_ok else "unavailable",
                "rateLimiting": {
                    "enabled": settings.rate_limit_enabled,
                    "defaultLimit": settings.rate_limit_default,
                },
            },
        )

    @app.get(
        "/",
        response_model=Envelope[None],
        tags=["Root"],
        summary="API root",
    )
    async def root() -> dict:
        """Welcome message."""
        return success_response(f"Welcome to {settings.app_name}")

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn app.main:app
app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# python -m app.main
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
