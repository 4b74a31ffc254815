# src/heartbeat_tracker/models/absence.py
"""Derived intervals during which a device sent no beats."""

from datetime import datetime, timedelta
from typing import Final

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from heartbeat_tracker.db.session import Base
from heartbeat_tracker.db.time import seconds_between

# Gaps shorter than this are never stored.
ABSENCE_THRESHOLD: Final[int] = 3600


def is_absence(gap_seconds: int) -> bool:
    """Return True when a gap between two beats qualifies as an absence."""
    return gap_seconds >= ABSENCE_THRESHOLD


class Absence(Base):
    """Gap ``(timestamp - duration, timestamp]`` between two consecutive beats.

    ``timestamp`` equals the end beat's timestamp and ``duration`` is the
    number of seconds since the begin beat.
    """

    __tablename__ = "absences"
    __table_args__ = (
        UniqueConstraint("begin_beat_id", "end_beat_id", name="uq_absences_beat_pair"),
        CheckConstraint(f"duration >= {ABSENCE_THRESHOLD}", name="ck_absences_threshold"),
        Index("ix_absences_device_timestamp", "device_id", "timestamp"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("devices.id", ondelete="CASCADE"),
        nullable=False,
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    begin_beat_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("beats.id", ondelete="CASCADE"),
        nullable=False,
    )
    end_beat_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("beats.id", ondelete="CASCADE"),
        nullable=False,
    )

    @property
    def start(self) -> datetime:
        """Timestamp of the beat that opened the gap."""
        return self.timestamp - timedelta(seconds=self.duration)

    def contains(self, instant: datetime) -> bool:
        """Return True if ``instant`` falls strictly after the start and at or before the end."""
        return seconds_between(instant, self.timestamp) < self.duration

    def links(self, begin_beat_id: int, end_beat_id: int) -> bool:
        """Return True if this absence spans exactly the given beat pair."""
        return self.begin_beat_id == begin_beat_id and self.end_beat_id == end_beat_id

    def __repr__(self) -> str:
        return (
            f"<Absence(id={self.id}, end={self.timestamp}, duration={self.duration}s, "
            f"beats={self.begin_beat_id}->{self.end_beat_id})>"
        )
