# src/heartbeat_tracker/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .beats import router as beats_router
from .system import router as system_router

__all__ = [
    "beats_router",
    "system_router",
]
