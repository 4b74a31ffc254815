# src/heartbeat_tracker/services/__init__.py
"""Business logic services for the heartbeat tracker."""

from .device_locks import DeviceLockRegistry
from .reconciler import BatchReconciler, SingleArrivalReconciler
from .watermark import LongestAbsenceWatermark

__all__ = [
    "BatchReconciler",
    "DeviceLockRegistry",
    "LongestAbsenceWatermark",
    "SingleArrivalReconciler",
]
