"""Shared API dependencies for device authentication and process-wide state."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from heartbeat_tracker.core.errors import MissingCredentialsError, UnknownDeviceError
from heartbeat_tracker.core.security import authenticate_device
from heartbeat_tracker.db.session import get_db
from heartbeat_tracker.models import Device
from heartbeat_tracker.services.device_locks import DeviceLockRegistry
from heartbeat_tracker.services.watermark import LongestAbsenceWatermark

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_device(
    db: SessionDep,
    authorization: Annotated[str | None, Header()] = None,
) -> Device:
    """Get the device identified by the ``Authorization`` header.

    Args:
        db: Database session
        authorization: Raw device token

    Returns:
        The authenticated device

    Raises:
        HTTPException: 400 if the header is missing, 401 if the token is unknown
    """
    try:
        return authenticate_device(db, authorization)
    except MissingCredentialsError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err
    except UnknownDeviceError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(err),
        ) from err


def get_watermark(request: Request) -> LongestAbsenceWatermark:
    """Return the process-wide longest-absence watermark."""
    return request.app.state.watermark


def get_device_locks(request: Request) -> DeviceLockRegistry:
    """Return the process-wide per-device lock registry."""
    return request.app.state.device_locks


CurrentDeviceDep = Annotated[Device, Depends(get_current_device)]
WatermarkDep = Annotated[LongestAbsenceWatermark, Depends(get_watermark)]
DeviceLocksDep = Annotated[DeviceLockRegistry, Depends(get_device_locks)]
