# src/heartbeat_tracker/models/beat.py
"""Liveness signals reported by devices."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from heartbeat_tracker.db.session import Base


class Beat(Base):
    """A single timestamped beat. Never updated or deleted once stored."""

    __tablename__ = "beats"
    __table_args__ = (
        Index("ix_beats_device_timestamp", "device_id", "timestamp"),
    )

    # Assigned by the database, so it grows monotonically with insertion order.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("devices.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Naive UTC, whole seconds.
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<Beat(id={self.id}, device={self.device_id}, at={self.timestamp})>"
