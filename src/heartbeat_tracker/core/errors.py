"""Exceptions raised by the reconciliation core."""

from __future__ import annotations


class HeartbeatError(RuntimeError):
    """Base exception for every failure surfaced by the heartbeat tracker."""


class EmptyBatchError(HeartbeatError, ValueError):
    """Raised when a batch arrives without any timestamps."""

    def __init__(self) -> None:
        super().__init__("no timestamps provided")


class DeviceAuthError(HeartbeatError):
    """Base exception for device credential failures."""


class MissingCredentialsError(DeviceAuthError):
    """Raised when the request carries no usable Authorization header."""


class UnknownDeviceError(DeviceAuthError):
    """Raised when the presented token does not belong to any device."""


class StorageError(HeartbeatError):
    """Raised when the backing transaction fails.

    The original database exception is always chained as ``__cause__``.
    """
