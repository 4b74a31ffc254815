# src/heartbeat_tracker/schemas/beat.py
"""Beat-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class BeatBatch(BaseModel):
    """Historical beats uploaded by a device that was offline."""

    timestamps: list[datetime] = Field(
        ...,
        description="Beat instants in any order; naive values are read as UTC.",
    )


class SystemStats(BaseModel):
    """Aggregate counters exposed by the system stats endpoint."""

    beats: int
    absences: int
    devices: int
    longest_absence_seconds: int
    uptime_seconds: int
