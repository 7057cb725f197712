"""Application configuration, loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_api_url: str = "https://api.github.com"
    github_api_version: str = "2022-11-28"
    stats_cache_ttl_seconds: float = 3600.0
    request_timeout_seconds: float = 10.0
    commits_page_size: int = 100
    max_concurrent_listings: int = 8
    default_per_page: int = 20
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings (cached after first call)."""
    return Settings()
