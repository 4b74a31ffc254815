"""Assemble the figures shown on the status page."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from heartbeat_tracker.core.settings import settings
from heartbeat_tracker.db.time import as_utc, seconds_between, utcnow
from heartbeat_tracker.repositories import DeviceStore, IntervalStore, TimelineStore
from heartbeat_tracker.services.watermark import LongestAbsenceWatermark

__all__ = ["StatusSnapshot", "build_status", "build_stats"]


@dataclass(frozen=True)
class StatusSnapshot:
    """Everything the home page renders."""

    first_beat: datetime
    last_beat: datetime
    since_last_beat: int
    longest_absence: int
    total_beats: int
    uptime: int

    @property
    def active(self) -> bool:
        return self.since_last_beat < settings.active_window_seconds

    @property
    def probably_asleep(self) -> bool:
        return self.since_last_beat > settings.asleep_after_seconds


def build_status(
    db: Session,
    watermark: LongestAbsenceWatermark,
    started_at: datetime,
    now: datetime | None = None,
) -> StatusSnapshot | None:
    """Return the status page figures, or None when no beat was ever stored.

    The gap since the last beat is still open, but it is fed into the
    watermark so an ongoing absence already counts toward the longest one.
    """
    now = now or utcnow()
    timeline = TimelineStore(db)
    first = timeline.first()
    last = timeline.last()
    if first is None or last is None:
        return None

    since_last = seconds_between(last.timestamp, now)
    return StatusSnapshot(
        first_beat=as_utc(first.timestamp),
        last_beat=as_utc(last.timestamp),
        since_last_beat=since_last,
        longest_absence=watermark.observe(since_last),
        total_beats=timeline.count(),
        uptime=seconds_between(started_at, now),
    )


def build_stats(
    db: Session,
    watermark: LongestAbsenceWatermark,
    started_at: datetime,
) -> dict[str, int]:
    """Return aggregate counters for the system stats endpoint."""
    return {
        "beats": TimelineStore(db).count(),
        "absences": IntervalStore(db).count(),
        "devices": len(DeviceStore(db).list_all()),
        "longest_absence_seconds": watermark.read(),
        "uptime_seconds": seconds_between(started_at, utcnow()),
    }
