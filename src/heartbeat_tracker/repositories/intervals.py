"""Data access helpers for derived absence intervals."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from heartbeat_tracker.db.time import seconds_between, to_storage
from heartbeat_tracker.models.absence import Absence
from heartbeat_tracker.models.beat import Beat

__all__ = ["IntervalStore"]


class IntervalStore:
    """Thin wrapper around database access for absences."""

    def __init__(self, session: Session) -> None:
        """Initialize the store with the session acting as the transaction."""
        self.session = session

    def range_from(self, device_id: int, instant: datetime) -> list[Absence]:
        """Return the device's absences ending strictly after ``instant``."""
        result = self.session.execute(
            select(Absence)
            .where(Absence.device_id == device_id, Absence.timestamp > to_storage(instant))
            .order_by(Absence.timestamp.asc(), Absence.id.asc())
        )
        return list(result.scalars())

    def create(self, begin: Beat, end: Beat) -> Absence:
        """Persist the absence spanning ``begin`` to ``end`` and return it."""
        absence = Absence(
            device_id=end.device_id,
            timestamp=end.timestamp,
            duration=seconds_between(begin.timestamp, end.timestamp),
            begin_beat_id=begin.id,
            end_beat_id=end.id,
        )
        self.session.add(absence)
        self.session.flush()
        return absence

    def delete(self, absence: Absence) -> None:
        """Remove an absence within the current transaction."""
        self.session.delete(absence)
        self.session.flush()

    def count(self) -> int:
        """Return the total number of stored absences."""
        return int(self.session.scalar(select(func.count()).select_from(Absence)) or 0)

    def recent(self, limit: int) -> list[Absence]:
        """Return up to ``limit`` absences, most recently ended first."""
        result = self.session.execute(
            select(Absence).order_by(Absence.timestamp.desc(), Absence.id.desc()).limit(limit)
        )
        return list(result.scalars())

    def longest_duration(self) -> int:
        """Return the longest stored duration in seconds, or 0 when empty."""
        return int(self.session.scalar(select(func.max(Absence.duration))) or 0)
