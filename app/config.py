# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.storage_root)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Settings are frozen after loading. Components that need credentials or
# paths receive them explicitly (see app/dependencies.py) instead of reading
# module globals at call time.
# =============================================================================

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    UPLOAD_DIR: str = Field(
        default="uploads",
        description="Storage root - every managed file and folder lives under it"
    )

    STAGING_DIR: str | None = Field(
        default=None,
        description="Where uploads are received before being moved into place "
                    "(defaults to a hidden folder inside UPLOAD_DIR)"
    )

    PUBLIC_DIR: str = Field(
        default="public",
        description="Static front end served at / when the folder exists"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=50,
        ge=1,
        le=10240,
        description="Maximum size of a single uploaded file in MB"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    CREDS_PATH: str = Field(
        default="credentials.json",
        description="JSON file holding the admin username and password hash"
    )

    ADMIN_USERNAME: str | None = Field(
        default=None,
        description="Bootstrap admin username (defaults to 'admin')"
    )

    ADMIN_PASSWORD: str | None = Field(
        default=None,
        description="Bootstrap admin password; skips first-run setup when set"
    )

    AUTH_SECRET: str = Field(
        default="change-me-secret",
        min_length=16,
        description="Secret key for signing bearer tokens"
    )

    TOKEN_TTL_HOURS: int = Field(
        default=168,
        ge=1,
        description="Lifetime of an issued bearer token"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        # Loaded once at startup, never mutated afterwards
        frozen=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def storage_root(self) -> Path:
        """Absolute storage root."""
        return Path(self.UPLOAD_DIR).resolve()

    @property
    def staging_dir(self) -> Path:
        """
        Absolute staging directory for incoming uploads.

        The default is a dot-folder inside the storage root: same volume, so
        moving a finished upload into place is a plain rename, and hidden,
        so it never shows up in listings or archives.
        """
        if self.STAGING_DIR:
            return Path(self.STAGING_DIR).resolve()
        return self.storage_root / ".incoming"

    @property
    def creds_path(self) -> Path:
        return Path(self.CREDS_PATH).resolve()

    @property
    def public_dir(self) -> Path:
        return Path(self.PUBLIC_DIR).resolve()

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://drop.example.com"
            -> ["http://localhost:3000", "https://drop.example.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """
        Convert MB to bytes for file size validation.
        """
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

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
