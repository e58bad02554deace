"""Centralized logging configuration for the application.

This module provides:
- Unified logger setup with console and rotating file handlers
- Optional structured JSON logging with contextual fields
- Helper functions for getting configured loggers
- Error message sanitization for logs and user-facing messages
"""

import logging
import re
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from homemaint.core.config import Settings, get_settings

_PATH_PATTERN = re.compile(r"(/[^\s:'\"]+)+")

# Standard log format for console/file
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "alembic")


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with ISO timestamp and extra fields."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        """Add custom fields to the JSON log record."""
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(UTC).isoformat()
        log_record["level"] = record.levelname
        log_record["component"] = record.name


def _build_formatter(settings: Settings, fmt: str) -> logging.Formatter:
    if settings.log_format == "json":
        return CustomJsonFormatter("%(message)s")
    return logging.Formatter(fmt)


def setup_logging(settings: Settings | None = None) -> None:
    """Configure application-wide logging.

    Sets up:
    - Console handler (StreamHandler) for development
    - File handler (RotatingFileHandler) for grep/tail
    """
    settings = settings or get_settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(_build_formatter(settings, CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    # File handler (rotating)
    try:
        log_path = Path(settings.log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=settings.log_file_max_bytes,
            backupCount=settings.log_file_backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(_build_formatter(settings, FILE_FORMAT))
        root_logger.addHandler(file_handler)
    except OSError as e:
        root_logger.warning(f"Could not set up file logging: {e}")

    # Reduce noise from third-party libraries
    if not settings.debug:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(
        f"Logging configured: level={settings.log_level}, "
        f"format={settings.log_format}, file={settings.log_file_path}"
    )


def sanitize_error(error: BaseException, max_length: int = 500) -> str:
    """Sanitize error message for logging and display.

    Removes potentially sensitive information from error messages:
    - Full file paths (keeps only filename)
    - Truncates long error messages

    Args:
        error: The exception to sanitize
        max_length: Maximum length of the sanitized message (default 500)

    Returns:
        Sanitized error message
    """
    msg = getattr(error, "message", None) or str(error)

    def _simplify_path(match: re.Match[str]) -> str:
        path = match.group(0)
        parts = path.rsplit("/", 1)
        if len(parts) == 2 and parts[0]:
            return f".../{parts[1]}"
        return path

    msg = _PATH_PATTERN.sub(_simplify_path, msg)

    if len(msg) > max_length:
        msg = msg[:max_length] + "...[truncated]"

    return msg


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
