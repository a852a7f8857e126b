# src/forum_desk/db/time.py
"""Time utilities for entities and database models."""

from datetime import UTC, datetime

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from drivers that drop tzinfo."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def format_timestamp(value: datetime | None, missing: str = "Never") -> str:
    """Render ``value`` for display, or ``missing`` when it is unset."""
    if value is None:
        return missing
    return value.strftime(DISPLAY_FORMAT)
