"""
Configuration settings for the Activity Store.

Uses Pydantic Settings to load environment variables for the storage location,
logging, persistence retries, and sample-data defaults.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Storage
    storage_dir: Path = Field(Path(".activity_store"), alias="LAP_STORAGE_DIR")
    write_attempts: int = Field(3, alias="LAP_WRITE_ATTEMPTS", ge=1)
    write_backoff_seconds: float = Field(0.05, alias="LAP_WRITE_BACKOFF_SECONDS", ge=0)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Sample data defaults
    sample_bookings: int = Field(8, alias="LAP_SAMPLE_BOOKINGS", ge=0)
    sample_payouts: int = Field(3, alias="LAP_SAMPLE_PAYOUTS", ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
