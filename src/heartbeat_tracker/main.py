# src/heartbeat_tracker/main.py
"""Main entry point for the heartbeat tracker application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from heartbeat_tracker.api.pages import router as pages_router
from heartbeat_tracker.api.v1 import beats_router, system_router
from heartbeat_tracker.core.errors import EmptyBatchError, HeartbeatError, StorageError
from heartbeat_tracker.core.settings import settings
from heartbeat_tracker.db.session import SessionLocal, create_tables
from heartbeat_tracker.db.time import utcnow
from heartbeat_tracker.services.device_locks import DeviceLockRegistry
from heartbeat_tracker.services.watermark import LongestAbsenceWatermark

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Device liveness tracking with derived absence intervals",
    version=settings.app_version,
)

# Process-wide state shared by every request; the watermark is re-seeded on startup.
app.state.started_at = utcnow()
app.state.watermark = LongestAbsenceWatermark()
app.state.device_locks = DeviceLockRegistry()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)
app.add_middleware(GZipMiddleware)

app.include_router(beats_router, prefix="/api")
app.include_router(system_router, prefix="/api")
app.include_router(pages_router)


@app.exception_handler(EmptyBatchError)
async def empty_batch_handler(request: Request, exc: EmptyBatchError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "request failed", "cause": str(exc.__cause__ or exc)},
    )


@app.exception_handler(HeartbeatError)
async def heartbeat_error_handler(request: Request, exc: HeartbeatError) -> JSONResponse:
    logger.error("Request to %s failed: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "request failed", "cause": str(exc)},
    )


@app.on_event("startup")
def on_startup() -> None:
    create_tables()
    with SessionLocal() as db:
        app.state.watermark = LongestAbsenceWatermark.from_session(db)
    app.state.started_at = utcnow()
    logger.info(
        "Started %s %s, longest absence on record: %ds",
        settings.app_name,
        settings.app_version,
        app.state.watermark.read(),
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("heartbeat_tracker.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)
