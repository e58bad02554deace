"""Column types shared by the models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import String, TypeDecorator


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def utcnow() -> datetime:
    return datetime.now(UTC)


class ISODateTime(TypeDecorator):
    """Timezone-aware datetime stored as ISO-8601 text.

    Values are normalized to UTC and written with a fixed microsecond width
    (``2024-05-01T12:00:00.000000+00:00``) so that text comparison in SQL
    orders the same way the datetimes do.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        if not isinstance(value, datetime):
            raise TypeError(f"ISODateTime expects datetime, got {type(value).__name__}")
        return ensure_utc(value).isoformat(timespec="microseconds")

    def process_result_value(self, value: Any, dialect: Any) -> datetime | None:
        if value is None:
            return None
        return ensure_utc(datetime.fromisoformat(value))
