# src/heartbeat_tracker/utils/days.py
"""Calendar-day helpers for the graph page."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta


def start_of_day(value: datetime) -> datetime:
    """Return midnight of the day ``value`` falls on, keeping its tzinfo."""
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def same_day(a: datetime, b: datetime) -> bool:
    """Return True if both instants fall on the same calendar day."""
    return a.date() == b.date()


def day_range(start: datetime, end: datetime) -> Iterator[datetime]:
    """Yield the midnight of every day from ``start`` to ``end`` inclusive."""
    day = start_of_day(start)
    last = start_of_day(end)
    while day <= last:
        yield day
        day += timedelta(days=1)
