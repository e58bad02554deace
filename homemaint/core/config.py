"""Application configuration using Pydantic Settings."""

import logging
import os
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SQLITE_ASYNC_PREFIX = "sqlite+aiosqlite://"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database configuration
    # SQLite only - one local file held open for the process lifetime
    # Example: sqlite+aiosqlite:///./data/homemaint.db
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/homemaint.db",
        description="SQLAlchemy database URL (SQLite with aiosqlite driver)",
    )

    # Application settings
    app_name: str = "Home Maintenance Tracker"
    app_version: str = "0.1.0"
    debug: bool = False

    # Attachment storage
    uploads_path: str = Field(
        default="./data/uploads",
        description="Root directory for hash-addressed attachment files",
    )
    max_upload_bytes: int = Field(
        default=50 * 1024 * 1024,
        description="Largest attachment payload accepted by the file store",
        gt=0,
    )

    # Dashboard windows
    expiring_warranty_days: int = Field(
        default=30,
        description="Warranties expiring within this many days are flagged",
        ge=1,
    )
    upcoming_task_days: int = Field(
        default=30,
        description="Tasks due within this many days are listed as upcoming",
        ge=1,
    )
    recent_maintenance_limit: int = Field(
        default=5,
        description="Number of maintenance records shown on the dashboard",
        ge=1,
    )

    # Seeding
    seed_on_startup: bool = Field(
        default=True,
        description="Create the default home, categories and locations on first run",
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="text",
        description="Log output format: 'text' or 'json'",
        pattern=r"^(text|json)$",
    )
    log_file_path: str = Field(
        default="data/logs/homemaint.log",
        description="Path for rotating log file",
    )
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum size of each log file in bytes",
    )
    log_file_backup_count: int = Field(
        default=5,
        description="Number of backup log files to keep",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate SQLite database URL format, upgrading plain sqlite:// URLs."""
        if v.startswith(_SQLITE_ASYNC_PREFIX):
            return v
        if v.startswith("sqlite://"):
            return _SQLITE_ASYNC_PREFIX + v.removeprefix("sqlite://")
        raise ValueError(
            f"Invalid database URL. Expected sqlite:// or sqlite+aiosqlite:// format, got: {v}"
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    env_file = os.getenv("HOMEMAINT_ENV_FILE", ".env")
    return Settings(_env_file=env_file)
