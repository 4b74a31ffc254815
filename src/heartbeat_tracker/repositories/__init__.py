"""Storage helpers wrapping a SQLAlchemy session."""

from .devices import DeviceStore
from .intervals import IntervalStore
from .timeline import TimelineStore

__all__ = ["DeviceStore", "IntervalStore", "TimelineStore"]
