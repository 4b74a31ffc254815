# src/heartbeat_tracker/schemas/__init__.py
"""Pydantic schemas for request and response bodies."""

from .beat import BeatBatch, SystemStats

__all__ = ["BeatBatch", "SystemStats"]
