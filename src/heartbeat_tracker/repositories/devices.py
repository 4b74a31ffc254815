"""Data access helpers for registered devices."""
from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from heartbeat_tracker.models.device import Device

__all__ = ["DeviceStore"]


class DeviceStore:
    """Thin wrapper around database access for devices."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_token(self, token: str) -> Device | None:
        """Return the device owning ``token``."""
        result = self.session.execute(select(Device).where(Device.token == token))
        return result.scalars().first()

    def list_all(self) -> list[Device]:
        """Return every device ordered by identifier."""
        return list(self.session.execute(select(Device).order_by(Device.id)).scalars())

    def create(self, *, name: str, token: str) -> Device:
        """Insert a new device with no beats."""
        device = Device(name=name, token=token, beat_count=0)
        self.session.add(device)
        self.session.flush()
        return device

    def increment_beat_count(self, device: Device, by: int) -> None:
        """Atomically add ``by`` to the device's beat counter."""
        self.session.execute(
            update(Device)
            .where(Device.id == device.id)
            .values(beat_count=Device.beat_count + by)
            .execution_options(synchronize_session=False)
        )
        self.session.expire(device, ["beat_count"])
