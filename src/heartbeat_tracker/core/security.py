"""Device credential helpers."""
from __future__ import annotations

import logging
import secrets

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from heartbeat_tracker.core.errors import MissingCredentialsError, StorageError, UnknownDeviceError
from heartbeat_tracker.models import Device
from heartbeat_tracker.repositories.devices import DeviceStore

logger = logging.getLogger(__name__)


def generate_token(nbytes: int = 32) -> str:
    """Return a fresh URL-safe device token."""
    return secrets.token_urlsafe(nbytes)


def authenticate_device(db: Session, authorization: str | None) -> Device:
    """Resolve the raw ``Authorization`` header value to a device.

    Args:
        db: Database session.
        authorization: Header value; the whole value is the device token.

    Returns:
        The device owning the token.

    Raises:
        MissingCredentialsError: If the header is absent or blank.
        UnknownDeviceError: If no device owns the token.
        StorageError: If the lookup itself fails.
    """
    token = (authorization or "").strip()
    if not token:
        raise MissingCredentialsError("authorization header is missing")

    try:
        device = DeviceStore(db).get_by_token(token)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Device lookup failed: %s", exc)
        raise StorageError(str(exc)) from exc
    if device is None:
        raise UnknownDeviceError("no device found with this token")
    return device
