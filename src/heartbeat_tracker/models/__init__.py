# src/heartbeat_tracker/models/__init__.py
"""SQLAlchemy models for the heartbeat tracker."""

from .absence import ABSENCE_THRESHOLD, Absence, is_absence
from .beat import Beat
from .device import Device

__all__ = [
    "ABSENCE_THRESHOLD",
    "Absence",
    "is_absence",
    "Beat",
    "Device",
]
