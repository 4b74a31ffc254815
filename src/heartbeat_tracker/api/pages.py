"""Human-facing HTML pages."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from heartbeat_tracker.core.settings import settings
from heartbeat_tracker.db.time import as_utc, utcnow
from heartbeat_tracker.repositories import DeviceStore, IntervalStore, TimelineStore
from heartbeat_tracker.services.graph import TIME_FORMAT, absence_chart, beat_strip
from heartbeat_tracker.services.status import build_status
from heartbeat_tracker.utils.humanize import format_relative

from .v1.dependencies import SessionDep, WatermarkDep

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[1] / "templates"))
templates.env.filters["relative"] = format_relative
templates.env.filters["utc"] = lambda value: value.strftime(TIME_FORMAT)
templates.env.globals["settings"] = settings

router = APIRouter(tags=["pages"], default_response_class=HTMLResponse)


@router.get("/")
def home(request: Request, db: SessionDep, watermark: WatermarkDep) -> HTMLResponse:
    """Render the status page."""
    status = build_status(db, watermark, request.app.state.started_at)
    return templates.TemplateResponse(request, "home.html", {"status": status})


@router.get("/report")
def report(request: Request, db: SessionDep) -> HTMLResponse:
    """List the most recent absences."""
    absences = [
        {
            "start": as_utc(a.start),
            "end": as_utc(a.timestamp),
            "duration": a.duration,
        }
        for a in IntervalStore(db).recent(settings.report_absences_limit)
    ]
    return templates.TemplateResponse(request, "report.html", {"absences": absences})


@router.get("/graph")
def graph(request: Request, db: SessionDep) -> HTMLResponse:
    """Draw recent beats per device and absences per day."""
    strip = beat_strip(
        TimelineStore(db).recent(settings.recent_beats_limit),
        DeviceStore(db).list_all(),
        utcnow(),
    )
    days = absence_chart(IntervalStore(db).recent(settings.report_absences_limit))
    return templates.TemplateResponse(
        request,
        "graph.html",
        {"strip": strip, "days": days, "hours": range(24)},
    )
