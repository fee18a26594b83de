# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# Every setting comes from the environment, falling back to a .env file in
# the working directory. Import the shared instance:
#
#   from app.config import settings
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_list(value: str, lower: bool = False) -> list[str]:
    items = [item.strip() for item in value.split(",") if item.strip()]
    return [item.lower() for item in items] if lower else items


class Settings(BaseSettings):
    """Staylo settings. Supabase credentials are required, the rest default."""

    # -------------------------------------------------------------------------
    # Supabase Configuration (database, auth, storage)
    # -------------------------------------------------------------------------

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for password sign-in)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying access tokens"
    )

    STORAGE_BUCKET: str = Field(
        default="images",
        description="Public storage bucket for listing and article images"
    )

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    RESEND_API_KEY: str = Field(
        default="",
        description="Resend API key for transactional email (empty disables email)"
    )

    EMAIL_FROM: str = Field(
        default="Staylo <noreply@staylo.com>",
        description="Sender address for outgoing email"
    )

    ADMIN_EMAIL: str = Field(
        default="admin@staylo.com",
        description="Recipient for new-inquiry notifications"
    )

    SLACK_WEBHOOK_URL: str = Field(
        default="",
        description="Slack incoming webhook URL (empty disables Slack alerts)"
    )

    PUBLIC_APP_URL: str = Field(
        default="http://localhost:8000",
        description="Public base URL, used for links in notifications"
    )

    # -------------------------------------------------------------------------
    # Redis / Celery
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    CELERY_TASK_ALWAYS_EAGER: bool = Field(
        default=False,
        description="Run Celery tasks inline (development without a broker)"
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

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins in production (comma-separated)"
    )

    ADMIN_EMAILS: str = Field(
        default="",
        description="Comma-separated admin allow-list (empty allows any signed-in user)"
    )

    ADMIN_COOKIE_NAME: str = Field(
        default="admin_token",
        description="Cookie holding the admin panel access token"
    )

    RATE_LIMIT_MAX_REQUESTS: int = Field(
        default=100,
        ge=1,
        description="Requests allowed per client IP per window"
    )

    RATE_LIMIT_WINDOW_SECONDS: int = Field(
        default=15 * 60,
        ge=1,
        description="Rate limit window length in seconds"
    )

    # -------------------------------------------------------------------------
    # Image Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum size of a single image in MB"
    )

    MAX_UPLOAD_FILES: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum number of images per upload request"
    )

    ALLOWED_IMAGE_EXTENSIONS: str = Field(
        default=".jpg,.jpeg,.png,.webp,.gif",
        description="Allowed image extensions (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        return _split_list(self.CORS_ORIGINS)

    @property
    def admin_emails_list(self) -> list[str]:
        """Lower-cased admin allow-list."""
        return _split_list(self.ADMIN_EMAILS, lower=True)

    @property
    def allowed_image_extensions_list(self) -> list[str]:
        """e.g. ".jpg, .PNG" -> [".jpg", ".png"]"""
        return _split_list(self.ALLOWED_IMAGE_EXTENSIONS, lower=True)

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """Build settings once per process."""
    return Settings()


settings = get_settings()
