# tests/helpers.py
"""Shortcuts for arranging timelines directly in the database."""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from heartbeat_tracker.models import Absence, Beat, Device


def days(n: float) -> timedelta:
    return timedelta(days=n)


def add_beats(db: Session, device: Device, *timestamps: datetime) -> list[Beat]:
    """Insert beats directly, bypassing reconciliation."""
    beats = [Beat(device_id=device.id, timestamp=ts) for ts in timestamps]
    db.add_all(beats)
    db.commit()
    return beats


def add_absence(db: Session, begin: Beat, end: Beat) -> Absence:
    """Insert the absence linking two stored beats."""
    absence = Absence(
        device_id=end.device_id,
        timestamp=end.timestamp,
        duration=int((end.timestamp - begin.timestamp).total_seconds()),
        begin_beat_id=begin.id,
        end_beat_id=end.id,
    )
    db.add(absence)
    db.commit()
    return absence


def count(db: Session, model: type) -> int:
    return int(db.scalar(select(func.count()).select_from(model)) or 0)


def absences(db: Session) -> list[Absence]:
    """Return every stored absence ordered by end timestamp."""
    return list(db.execute(select(Absence).order_by(Absence.timestamp)).scalars())


def beat_count(db: Session, device: Device) -> int:
    """Read the device counter straight from the database."""
    return int(db.scalar(select(Device.beat_count).where(Device.id == device.id)))
