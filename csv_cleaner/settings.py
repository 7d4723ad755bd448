"""
Service settings, loaded from ``CSV_CLEANER_*`` environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CSV_CLEANER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Rows returned for display; processing is never capped
    preview_rows: int = 100

    max_upload_bytes: int = 20 * 1024 * 1024
    export_encoding: str = "utf-8"

    # Oldest sessions are evicted past this count; idle ones expire after the TTL
    max_sessions: int = 32
    session_ttl_seconds: Optional[float] = 3600


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
