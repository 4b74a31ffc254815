# src/heartbeat_tracker/models/device.py
"""Registered devices allowed to report beats."""

from sqlalchemy import BigInteger, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from heartbeat_tracker.db.session import Base


class Device(Base):
    """A device identified by its bearer token.

    ``beat_count`` only ever grows, by exactly the number of beats stored
    for the device.
    """

    __tablename__ = "devices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    token: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    beat_count: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Device(id={self.id}, name={self.name!r}, beats={self.beat_count})>"
