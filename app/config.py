"""
Application Configuration Module

Type-safe configuration for the Book Review API, loaded with Pydantic Settings.

Values are read from environment variables first, then from a local .env
file, and finally fall back to the defaults declared below. Every value is
validated at startup, so a bad configuration fails fast instead of at the
first request that touches it.

Usage:
    from app.config import get_settings

    settings = get_settings()
    print(settings.mongo_url)
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic Settings automatically:
    1. Reads from environment variables (case-insensitive)
    2. Falls back to .env file if env var not found
    3. Validates types and raises errors for invalid values

    SECURITY NOTE:
    ==============
    secret_key has a validator. Placeholder values raise at startup.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = Field(
        default="Book Review App",
        description="Application name displayed in docs, logs and the root greeting"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (auto-reload)"
    )
    api_version: str = Field(
        default="1.0.0",
        description="API version reported by /health and the OpenAPI schema"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to"
    )
    port: int = Field(
        default=5000,
        description="Port to bind the server to"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    # -------------------------------------------------------------------------
    # Database Settings
    # -------------------------------------------------------------------------
    mongo_url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URL"
    )
    mongo_db_name: str = Field(
        default="book_review",
        description="Name of the MongoDB database holding all collections"
    )

    # -------------------------------------------------------------------------
    # Catalog Settings
    # -------------------------------------------------------------------------
    default_book_image: str = Field(
        default="/rich and poor dad.jpg",
        description="Image used when a book is created without one"
    )

    # -------------------------------------------------------------------------
    # Security Settings
    # -------------------------------------------------------------------------
    secret_key: str = Field(
        default="REPLACE_WITH_YOUR_GENERATED_SECRET_KEY",
        description="Secret key used to sign JWT tokens"
    )
    access_token_expire_minutes: int = Field(
        default=60,
        ge=1,
        description="Lifetime of access tokens in minutes"
    )
    refresh_token_expire_days: int = Field(
        default=7,
        ge=1,
        description="Lifetime of refresh tokens in days"
    )
    allowed_origins: str = Field(
        default=(
            "http://localhost:5173,"
            "https://book-review-app-lhw4-mzzozc4dm-aryalkiran21s-projects.vercel.app"
        ),
        description="Comma-separated list of allowed CORS origins"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting Settings
    # -------------------------------------------------------------------------
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable per-client rate limiting"
    )
    rate_limit_default: str = Field(
        default="100/minute",
        description="Default limit applied to every endpoint"
    )
    rate_limit_write: str = Field(
        default="30/minute",
        description="Limit for create/update/delete endpoints"
    )
    rate_limit_auth: str = Field(
        default="10/minute",
        description="Limit for registration and login"
    )

    # -------------------------------------------------------------------------
    # Logging Settings
    # -------------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------
    @property
    def allowed_origins_list(self) -> List[str]:
        """
        Parse comma-separated CORS origins into a list.

        Returns:
            List of allowed origin URLs, blanks dropped
        """
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate that log_level is a valid Python logging level.

        Args:
            v: The value to validate

        Returns:
            The validated value (uppercase)

        Raises:
            ValueError: If log level is invalid
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """
        Validate that secret_key is not a placeholder value.

        The application will fail to start if SECRET_KEY is not properly set.

        Raises:
            ValueError: If secret key is a placeholder or too short
        """
        placeholder_indicators = [
            "REPLACE_WITH",
            "change-me",
            "your-secret",
            "generate-with",
        ]

        for indicator in placeholder_indicators:
            if indicator.lower() in v.lower():
                raise ValueError(
                    "SECRET_KEY contains a placeholder value. "
                    "Generate a secure key with: openssl rand -hex 32"
                )

        if len(v) < 32:
            raise ValueError(
                "SECRET_KEY must be at least 32 characters long. "
                "Generate a secure key with: openssl rand -hex 32"
            )

        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        valid_envs = {"development", "staging", "production"}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}")
        return v.lower()


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    The first call builds and validates Settings; later calls return
    the same instance.

    Returns:
        Cached Settings instance
    """
    return Settings()
