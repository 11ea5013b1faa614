"""
Application Configuration

Settings are read from environment variables (or a local .env file) once
and cached. Every tunable used by the portal lives here.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Portal settings, configurable via environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Application
    app_name: str = "Admit Portal"
    python_env: str = "development"
    port: int = 3000
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./admit_portal.db"
    database_echo: bool = False
    auto_create_tables: bool = True

    # Redis (optional, sessions fall back to process memory without it)
    redis_url: str | None = None

    # Sessions
    secret_key: str = "dev-secret-key-change-in-production"
    session_cookie_name: str = "admit_session"
    session_ttl_seconds: int = 60 * 60 * 24
    session_cookie_secure: bool = False

    # Security
    bcrypt_rounds: int = 12

    # Applications
    page_size: int = 5
    application_variant: str = "full"
    registration_prefix: str = "GOV"

    # Upload storage
    storage_backend: str = "local"
    upload_dir: str = "uploads"
    upload_url_prefix: str = "/uploads"
    max_upload_mb: int = 5
    allowed_image_types: list[str] = ["image/jpeg", "image/png", "image/webp"]

    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_folder: str = "person-manager-app"
    s3_endpoint_url: str | None = None
    s3_public_base_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None

    @field_validator("application_variant")
    @classmethod
    def _check_variant(cls, value: str) -> str:
        value = value.lower()
        if value not in {"full", "basic"}:
            raise ValueError("application_variant must be 'full' or 'basic'")
        return value

    @field_validator("storage_backend")
    @classmethod
    def _check_storage_backend(cls, value: str) -> str:
        value = value.lower()
        if value not in {"local", "s3"}:
            raise ValueError("storage_backend must be 'local' or 's3'")
        return value

    @field_validator("page_size")
    @classmethod
    def _check_page_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("page_size must be at least 1")
        return value

    @property
    def is_production(self) -> bool:
        return self.python_env.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.python_env.lower() == "development"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


settings = get_settings()
