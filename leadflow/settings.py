"""Application settings using Pydantic BaseSettings."""

import os
import re

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_async_database_url() -> str:
    """Get database URL converted for asyncpg driver."""
    url = os.environ.get("DATABASE_URL", "") or settings.database_url
    # Convert postgres:// to postgresql+asyncpg:// for SQLAlchemy async
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://") and "+asyncpg" not in url:
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    # asyncpg doesn't support sslmode, it uses ssl parameter
    if "sslmode=" in url:
        url = re.sub(r'[?&]sslmode=[^&]*', '', url)
        url = url.rstrip('?&')
    return url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Postgres in production, sqlite+aiosqlite for local runs and tests
    database_url: str = "sqlite+aiosqlite:///./leadflow.db"

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    api_v1_prefix: str = "/api/v1"

    # Fernet key used for tenant SMTP credentials at rest
    field_encryption_key: str | None = None

    # Mail relay
    smtp_connect_timeout_seconds: float = 10.0
    smtp_send_timeout_seconds: float = 30.0
    admin_send_concurrency: int = 4

    # Email theme fallbacks when a tenant has not customised its templates
    default_primary_color: str = "#3b82f6"
    default_font_family: str = "Arial, sans-serif"
    default_footer_bg_color: str = "#f9fafb"

    # Country calling code used by the phone formatter (single-country deployment)
    phone_country_code: str = "44"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
