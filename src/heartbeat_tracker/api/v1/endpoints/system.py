"""System and transparency endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from sqlalchemy import text

from heartbeat_tracker.core.settings import settings
from heartbeat_tracker.schemas.beat import SystemStats
from heartbeat_tracker.services.status import build_stats

from ..dependencies import SessionDep, WatermarkDep

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/stats", response_model=SystemStats)
def get_stats(request: Request, db: SessionDep, watermark: WatermarkDep) -> dict[str, int]:
    """Return beat, absence and device counters alongside the watermark and uptime."""
    return build_stats(db, watermark, request.app.state.started_at)


@router.get("/health")
def get_system_health(db: SessionDep) -> dict[str, object]:
    """Health check that also verifies database connectivity.

    Args:
        db: Database session

    Returns:
        Dictionary with overall status, database status and version
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        db_status = f"unhealthy: {e}"

    return {
        "status": "healthy" if db_status == "healthy" else "unhealthy",
        "components": {"database": db_status},
        "version": settings.app_version,
    }
