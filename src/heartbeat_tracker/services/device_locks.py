"""Per-device mutual exclusion for reconciliation."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock

__all__ = ["DeviceLockRegistry"]


class DeviceLockRegistry:
    """Hands out one lock per device so overlapping requests run one at a time.

    Requests for different devices never wait on each other.
    """

    def __init__(self) -> None:
        self._registry_lock = Lock()
        self._locks: dict[int, Lock] = {}

    def lock_for(self, device_id: int) -> Lock:
        """Return the lock guarding ``device_id``, creating it on first use."""
        with self._registry_lock:
            lock = self._locks.get(device_id)
            if lock is None:
                lock = self._locks[device_id] = Lock()
            return lock

    @contextmanager
    def hold(self, device_id: int) -> Iterator[None]:
        """Hold the device's lock for the duration of the block."""
        lock = self.lock_for(device_id)
        with lock:
            yield

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)
