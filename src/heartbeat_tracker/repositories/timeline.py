"""Data access helpers for the beat timeline."""
from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from heartbeat_tracker.db.time import to_storage
from heartbeat_tracker.models.beat import Beat

__all__ = ["TimelineStore"]


class TimelineStore:
    """Thin wrapper around database access for beats."""

    def __init__(self, session: Session) -> None:
        """Initialize the store with the session acting as the transaction."""
        self.session = session

    def append(self, device_id: int, timestamps: Iterable[datetime]) -> list[Beat]:
        """Insert one beat per timestamp and return them in input order.

        The beats are flushed so their identifiers are populated before the
        caller links absences to them.
        """
        beats = [Beat(device_id=device_id, timestamp=to_storage(ts)) for ts in timestamps]
        self.session.add_all(beats)
        self.session.flush()
        return beats

    def range_from(self, device_id: int, instant: datetime) -> list[Beat]:
        """Return the device's beats at or after ``instant`` in ascending order.

        Beats sharing a timestamp come newest-insert first, so the oldest beat
        of a tie stays adjacent to whatever follows it and the absences already
        linked to it remain consecutive pairs.
        """
        result = self.session.execute(
            select(Beat)
            .where(Beat.device_id == device_id, Beat.timestamp >= to_storage(instant))
            .order_by(Beat.timestamp.asc(), Beat.id.desc())
        )
        return list(result.scalars())

    def last_before(self, device_id: int, instant: datetime) -> Beat | None:
        """Return the device's latest beat strictly before ``instant``."""
        result = self.session.execute(
            select(Beat)
            .where(Beat.device_id == device_id, Beat.timestamp < to_storage(instant))
            .order_by(Beat.timestamp.desc(), Beat.id.desc())
            .limit(1)
        )
        return result.scalars().first()

    def last(self, device_id: int | None = None) -> Beat | None:
        """Return the most recent beat, optionally scoped to one device."""
        stmt = select(Beat).order_by(Beat.timestamp.desc(), Beat.id.desc()).limit(1)
        if device_id is not None:
            stmt = stmt.where(Beat.device_id == device_id)
        return self.session.execute(stmt).scalars().first()

    def first(self, device_id: int | None = None) -> Beat | None:
        """Return the oldest beat, optionally scoped to one device."""
        stmt = select(Beat).order_by(Beat.timestamp.asc(), Beat.id.asc()).limit(1)
        if device_id is not None:
            stmt = stmt.where(Beat.device_id == device_id)
        return self.session.execute(stmt).scalars().first()

    def count(self) -> int:
        """Return the total number of stored beats."""
        return int(self.session.scalar(select(func.count()).select_from(Beat)) or 0)

    def recent(self, limit: int) -> list[Beat]:
        """Return up to ``limit`` beats, newest first."""
        result = self.session.execute(
            select(Beat).order_by(Beat.timestamp.desc(), Beat.id.desc()).limit(limit)
        )
        return list(result.scalars())
