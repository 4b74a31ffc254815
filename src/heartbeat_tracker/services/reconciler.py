"""Keep derived absences consistent with the beat timeline.

Two entry points exist. :class:`SingleArrivalReconciler` records one beat at
the current instant, which can only ever close the newest gap.
:class:`BatchReconciler` accepts historical timestamps in any order, so it
has to drop every absence a new beat lands inside and rebuild the gaps of
the affected part of the timeline.

Both run their whole read-modify-write sequence under the device's lock and
inside a single transaction. Gaps reach the watermark only after that transaction
commits.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from itertools import pairwise

from sqlalchemy.orm import Session

from heartbeat_tracker.core.errors import EmptyBatchError
from heartbeat_tracker.db.session import unit_of_work
from heartbeat_tracker.db.time import seconds_between, to_storage, utcnow
from heartbeat_tracker.models import Absence, Beat, Device, is_absence
from heartbeat_tracker.repositories import DeviceStore, IntervalStore, TimelineStore
from heartbeat_tracker.services.device_locks import DeviceLockRegistry
from heartbeat_tracker.services.watermark import LongestAbsenceWatermark

logger = logging.getLogger(__name__)

__all__ = ["BatchReconciler", "SingleArrivalReconciler"]


class _Reconciler:
    def __init__(
        self,
        db: Session,
        watermark: LongestAbsenceWatermark,
        locks: DeviceLockRegistry,
    ) -> None:
        self.db = db
        self.watermark = watermark
        self.locks = locks
        self.timeline = TimelineStore(db)
        self.intervals = IntervalStore(db)
        self.devices = DeviceStore(db)

    def _record_gap(self, begin: Beat, end: Beat, gaps: list[int]) -> Absence | None:
        """Collect the gap into ``gaps`` and store it if it qualifies."""
        gap = seconds_between(begin.timestamp, end.timestamp)
        gaps.append(gap)
        if not is_absence(gap):
            return None
        absence = self.intervals.create(begin, end)
        logger.debug(
            "Recorded absence of %ds for device %d (beats %d -> %d)",
            gap,
            end.device_id,
            begin.id,
            end.id,
        )
        return absence

    def _publish(self, gaps: list[int]) -> None:
        """Raise the watermark once the gaps are committed."""
        if gaps:
            self.watermark.observe(max(gaps))


class SingleArrivalReconciler(_Reconciler):
    """Record a beat arriving now."""

    def reconcile(self, device: Device, now: datetime | None = None) -> datetime:
        """Store a beat for ``device`` at ``now`` and close the gap since its last beat.

        Args:
            device: Device reporting the beat.
            now: Arrival instant; defaults to the current UTC time.

        Returns:
            The instant the beat was stored at, truncated to whole seconds.

        Raises:
            StorageError: If the transaction fails. Nothing is persisted.
        """
        now = to_storage(now) if now is not None else utcnow()
        gaps: list[int] = []

        with self.locks.hold(device.id), unit_of_work(self.db):
            last = self.timeline.last(device.id)
            (beat,) = self.timeline.append(device.id, [now])
            self.devices.increment_beat_count(device, 1)
            if last is not None:
                self._record_gap(last, beat, gaps)
        self._publish(gaps)

        logger.info("Accepted beat from device %d at %s", device.id, now.isoformat())
        return now


class BatchReconciler(_Reconciler):
    """Record a batch of possibly historical, unordered beats."""

    def reconcile(self, device: Device, timestamps: Iterable[datetime]) -> int:
        """Store one beat per timestamp and rebuild the absences they affect.

        Args:
            device: Device the beats belong to.
            timestamps: Beat instants in any order; duplicates are allowed.

        Returns:
            The number of beats inserted.

        Raises:
            EmptyBatchError: If ``timestamps`` is empty. Nothing is touched.
            StorageError: If the transaction fails. Nothing is persisted.
        """
        arrivals = [to_storage(ts) for ts in timestamps]
        if not arrivals:
            raise EmptyBatchError()
        gaps: list[int] = []

        with self.locks.hold(device.id), unit_of_work(self.db):
            inserted = self.timeline.append(device.id, arrivals)
            self.devices.increment_beat_count(device, len(inserted))

            earliest = min(arrivals)
            # The beat preceding the earliest arrival bounds the first gap that may change.
            anchor = self.timeline.last_before(device.id, earliest)
            since = anchor.timestamp if anchor is not None else earliest

            beats = self.timeline.range_from(device.id, since)
            candidates = self.intervals.range_from(device.id, since)

            self._invalidate(candidates, arrivals)
            self._regenerate(beats, candidates, gaps)
        self._publish(gaps)

        logger.info("Accepted batch of %d beats from device %d", len(inserted), device.id)
        return len(inserted)

    def _invalidate(self, candidates: list[Absence], arrivals: Sequence[datetime]) -> None:
        """Delete every candidate that any arrival falls inside.

        ``candidates`` is pruned in place so it only keeps still-valid absences.
        """
        idx = 0
        while idx < len(candidates):
            absence = candidates[idx]
            if any(absence.contains(ts) for ts in arrivals):
                logger.debug(
                    "Dropping absence %d of device %d interrupted by a new beat",
                    absence.id,
                    absence.device_id,
                )
                self.intervals.delete(absence)
                del candidates[idx]
                continue
            idx += 1

    def _regenerate(
        self, beats: Sequence[Beat], candidates: Sequence[Absence], gaps: list[int]
    ) -> None:
        """Recreate the gaps between consecutive beats not already represented."""
        for prev, cur in pairwise(beats):
            if any(absence.links(prev.id, cur.id) for absence in candidates):
                continue
            self._record_gap(prev, cur, gaps)
