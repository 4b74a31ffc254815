"""Process-wide longest-absence watermark."""

from __future__ import annotations

from threading import Lock

from sqlalchemy.orm import Session

from heartbeat_tracker.repositories.intervals import IntervalStore

__all__ = ["LongestAbsenceWatermark"]


class LongestAbsenceWatermark:
    """Running maximum of observed gap durations, in seconds.

    The value only ever grows for the lifetime of the process. It is seeded
    from the stored absences at startup and is not written back.
    """

    def __init__(self, initial: int = 0) -> None:
        self._lock = Lock()
        self._value = max(0, int(initial))

    @classmethod
    def from_session(cls, db: Session) -> LongestAbsenceWatermark:
        """Seed a watermark with the longest persisted absence."""
        return cls(IntervalStore(db).longest_duration())

    def observe(self, seconds: int) -> int:
        """Raise the watermark to ``seconds`` if larger; return the resulting value."""
        with self._lock:
            if seconds > self._value:
                self._value = int(seconds)
            return self._value

    def read(self) -> int:
        """Return the current watermark."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"LongestAbsenceWatermark({self.read()})"
