# src/heartbeat_tracker/api/v1/endpoints/beats.py
"""Beat ingestion endpoints used by devices."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from heartbeat_tracker.db.time import as_utc
from heartbeat_tracker.schemas.beat import BeatBatch
from heartbeat_tracker.services.reconciler import BatchReconciler, SingleArrivalReconciler

from ..dependencies import CurrentDeviceDep, DeviceLocksDep, SessionDep, WatermarkDep

router = APIRouter(tags=["beats"])


# Sync handlers: FastAPI runs them in its threadpool, so a device lock held
# by one request never blocks the event loop.
@router.post("/beat", response_class=PlainTextResponse)
def post_beat(
    device: CurrentDeviceDep,
    db: SessionDep,
    watermark: WatermarkDep,
    locks: DeviceLocksDep,
) -> str:
    """Record a beat at the current instant and return it as a unix timestamp."""
    accepted = SingleArrivalReconciler(db, watermark, locks).reconcile(device)
    return str(int(as_utc(accepted).timestamp()))


@router.post("/batch", response_class=PlainTextResponse)
def post_batch(
    batch: BeatBatch,
    device: CurrentDeviceDep,
    db: SessionDep,
    watermark: WatermarkDep,
    locks: DeviceLocksDep,
) -> str:
    """Record historical beats and return how many were accepted."""
    inserted = BatchReconciler(db, watermark, locks).reconcile(device, batch.timestamps)
    return str(inserted)
