# src/heartbeat_tracker/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import beats_router, system_router

__all__ = [
    "beats_router",
    "system_router",
]
