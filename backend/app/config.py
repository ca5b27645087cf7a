"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Briefing Hub"
    environment: str = "development"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"
    site_url: str = ""  # Public base URL, used for pre-warming and the sitemap
    log_level: str = "INFO"

    # Supabase Postgres (asyncpg DSN)
    database_url: str = ""

    # FreshRSS (Google Reader API)
    freshrss_api_url: str = ""
    freshrss_auth_token: str = ""

    # Access control
    access_token: str = ""
    revalidation_secret: str = ""
    bot_guard_enabled: bool = True

    # AI provider (dashboard summary)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    # Cache
    cache_backend: Literal["memory", "dynamodb"] = "memory"
    cache_table_name: str = "briefing-hub-cache"

    # DynamoDB
    aws_region: str = "us-east-1"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    dynamodb_endpoint_url: str | None = None  # Set for local development

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def database_configured(self) -> bool:
        return bool(self.database_url)

    @property
    def freshrss_configured(self) -> bool:
        return bool(self.freshrss_api_url and self.freshrss_auth_token)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
