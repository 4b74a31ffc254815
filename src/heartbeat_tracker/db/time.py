# src/heartbeat_tracker/db/time.py
"""Time utilities for database models.

Beats are stored as naive UTC datetimes with whole-second resolution, which
is what SQLite hands back regardless of the tzinfo it was given.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime truncated to the second."""
    return to_storage(datetime.now(UTC))


def to_storage(value: datetime) -> datetime:
    """Normalize ``value`` to a naive UTC datetime without microseconds."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.replace(microsecond=0)


def as_utc(value: datetime) -> datetime:
    """Attach UTC tzinfo to a stored naive timestamp."""
    return value.replace(tzinfo=UTC)


def seconds_between(earlier: datetime, later: datetime) -> int:
    """Return the whole number of seconds from ``earlier`` to ``later``."""
    return int((later - earlier).total_seconds())
