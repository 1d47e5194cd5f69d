# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.ROUTES_CONFIG_PATH)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lib.utils import split_csv

# Reported by the root and health endpoints
VERSION = "1.0.0"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance, or passed
    explicitly to create_app() in tests.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    API_PREFIX: str = Field(
        default="/api/v1",
        description="Prefix mounted in front of every configured route"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Route / Permission Documents
    # -------------------------------------------------------------------------
    # Relative paths resolve against the process working directory

    ROUTES_CONFIG_PATH: str = Field(
        default="config/routes.yaml",
        description="Routes document (resources, endpoints, methods, status)"
    )

    PERMISSIONS_CONFIG_PATH: str = Field(
        default="config/permissions.yaml",
        description="Permissions document (scopes and actions per model/service)"
    )

    REGISTRY_STRICT: bool = Field(
        default=False,
        description="Fail startup when a document lacks its top-level collection"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    SECRET_KEY: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing tokens"
    )

    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )

    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=30,
        ge=1,
        description="Lifetime of access tokens"
    )

    REFRESH_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60 * 24 * 7,
        ge=1,
        description="Lifetime of refresh tokens"
    )

    # Seeded at startup when both are set
    ADMIN_USERNAME: str | None = Field(
        default=None,
        description="Username of the bootstrap admin account"
    )

    ADMIN_PASSWORD: str | None = Field(
        default=None,
        description="Password of the bootstrap admin account"
    )

    ADMIN_SCOPES: str = Field(
        default="admin",
        description="Scopes granted to the bootstrap admin (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    STORAGE_BACKEND: Literal["memory", "supabase"] = Field(
        default="memory",
        description="Where resource records are kept"
    )

    SUPABASE_URL: str | None = Field(
        default=None,
        description="Supabase project URL (required for the supabase backend)"
    )

    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Supabase service_role key (required for the supabase backend)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://mwallet.app" -> ["http://localhost:3000", "https://mwallet.app"]
        """
        return split_csv(self.CORS_ORIGINS)

    @property
    def admin_scopes_list(self) -> list[str]:
        return split_csv(self.ADMIN_SCOPES)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
