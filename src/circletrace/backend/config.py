"""Configuration settings for circletrace."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # CircleCI
    circleci_api_url: str = "https://circleci.com/api/v2"
    circleci_token: str | None = None
    request_timeout: float = 30.0
    max_pages: int = 20

    # Trace viewer
    viewer_base_url: str = "https://trace.playwright.dev/"
    proxy_base_url: str | None = None

    # Logging
    log_level: str = "INFO"
    log_json_format: bool = True

    # Server
    host: str = "0.0.0.0"  # noqa: S104 - intentional for Docker
    port: int = 8000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
