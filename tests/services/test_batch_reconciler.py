"""Tests for reconciling batches of historical beats."""

from datetime import UTC, timedelta

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from heartbeat_tracker.core.errors import EmptyBatchError, StorageError
from heartbeat_tracker.models import Absence, Beat, Device
from heartbeat_tracker.repositories.intervals import IntervalStore
from heartbeat_tracker.services.reconciler import BatchReconciler
from tests.helpers import absences, add_absence, add_beats, beat_count, count, days


@pytest.fixture()
def reconciler(db_session: Session, watermark, locks) -> BatchReconciler:
    return BatchReconciler(db_session, watermark, locks)


def test_empty_batch_is_rejected_without_side_effects(
    reconciler, db_session, device: Device
) -> None:
    with pytest.raises(EmptyBatchError, match="no timestamps provided"):
        reconciler.reconcile(device, [])

    assert count(db_session, Beat) == 0
    assert beat_count(db_session, device) == 0


def test_three_days_apart_into_empty_timeline(
    reconciler, db_session, device: Device, base_time
) -> None:
    inserted = reconciler.reconcile(
        device,
        [base_time - days(9), base_time - days(10), base_time - days(8)],
    )

    assert inserted == 3
    assert beat_count(db_session, device) == 3
    stored = absences(db_session)
    assert [a.duration for a in stored] == [86400, 86400]
    assert [a.timestamp for a in stored] == [base_time - days(9), base_time - days(8)]
    assert reconciler.watermark.read() == 86400


def test_same_batch_twice_does_not_duplicate_absences(
    reconciler, db_session, device: Device, base_time
) -> None:
    batch = [base_time - days(10), base_time - days(9), base_time - days(8)]

    reconciler.reconcile(device, batch)
    reconciler.reconcile(device, batch)

    assert count(db_session, Beat) == 6
    assert beat_count(db_session, device) == 6
    stored = absences(db_session)
    assert len(stored) == 2
    assert len({(a.begin_beat_id, a.end_beat_id) for a in stored}) == 2
    assert reconciler.watermark.read() == 86400


def test_beat_inside_absence_splits_it(reconciler, db_session, device: Device, base_time) -> None:
    begin, end = add_beats(db_session, device, base_time - days(10), base_time - days(9))
    original = add_absence(db_session, begin, end)
    original_id = original.id

    reconciler.reconcile(device, [base_time - days(9.5)])

    stored = absences(db_session)
    assert original_id not in {a.id for a in stored}
    assert [a.duration for a in stored] == [43200, 43200]
    assert stored[0].begin_beat_id == begin.id
    assert stored[1].end_beat_id == end.id
    assert stored[0].end_beat_id == stored[1].begin_beat_id


def test_interrupted_absence_disappears_when_both_halves_are_short(
    reconciler, db_session, device: Device, base_time
) -> None:
    begin, end = add_beats(db_session, device, base_time - timedelta(seconds=5000), base_time)
    add_absence(db_session, begin, end)

    reconciler.reconcile(device, [base_time - timedelta(seconds=2500)])

    assert count(db_session, Absence) == 0
    assert reconciler.watermark.read() == 2500


def test_beat_before_absence_leaves_it_alone(
    reconciler, db_session, device: Device, base_time
) -> None:
    begin, end = add_beats(db_session, device, base_time - timedelta(seconds=5000), base_time)
    kept = add_absence(db_session, begin, end)

    reconciler.reconcile(device, [base_time - timedelta(seconds=5020)])

    (absence,) = absences(db_session)
    assert absence.id == kept.id
    assert reconciler.watermark.read() == 20


def test_existing_absences_are_not_duplicated(
    reconciler, db_session, device: Device, base_time
) -> None:
    b1, b2 = add_beats(db_session, device, base_time - days(5), base_time - days(3))
    add_absence(db_session, b1, b2)

    reconciler.reconcile(device, [base_time - days(10), base_time - days(9)])

    # 10d -> 9d, 9d -> 5d and the untouched 5d -> 3d.
    assert [a.duration for a in absences(db_session)] == [86400, 4 * 86400, 2 * 86400]


def test_beat_at_absence_start_does_not_invalidate(
    reconciler, db_session, device: Device, base_time
) -> None:
    begin, end = add_beats(db_session, device, base_time, base_time + timedelta(hours=2))
    kept = add_absence(db_session, begin, end)

    reconciler.reconcile(device, [base_time])

    (absence,) = absences(db_session)
    assert absence.id == kept.id


def test_beat_at_absence_end_rebuilds_same_gap(
    reconciler, db_session, device: Device, base_time
) -> None:
    begin, end = add_beats(db_session, device, base_time, base_time + timedelta(hours=2))
    add_absence(db_session, begin, end)

    reconciler.reconcile(device, [base_time + timedelta(hours=2)])

    (absence,) = absences(db_session)
    assert absence.begin_beat_id == begin.id
    assert absence.duration == 7200
    assert absence.timestamp == base_time + timedelta(hours=2)


def test_several_beats_in_one_absence(reconciler, db_session, device: Device, base_time) -> None:
    begin, end = add_beats(db_session, device, base_time, base_time + timedelta(hours=10))
    add_absence(db_session, begin, end)

    reconciler.reconcile(
        device,
        [base_time + timedelta(hours=4), base_time + timedelta(hours=2)],
    )

    assert [a.duration for a in absences(db_session)] == [7200, 7200, 6 * 3600]


def test_beats_in_different_absences(reconciler, db_session, device: Device, base_time) -> None:
    b1, b2, b3 = add_beats(
        db_session,
        device,
        base_time,
        base_time + timedelta(hours=4),
        base_time + timedelta(hours=8),
    )
    add_absence(db_session, b1, b2)
    add_absence(db_session, b2, b3)

    reconciler.reconcile(
        device,
        [base_time + timedelta(minutes=150), base_time + timedelta(minutes=390)],
    )

    # Each four hour gap is split into 2.5h + 1.5h.
    assert [a.duration for a in absences(db_session)] == [9000, 5400, 9000, 5400]


def test_short_gaps_only_move_watermark(reconciler, db_session, device: Device, base_time) -> None:
    reconciler.reconcile(
        device,
        [base_time, base_time + timedelta(minutes=30), base_time + timedelta(minutes=89)],
    )

    assert count(db_session, Absence) == 0
    assert reconciler.watermark.read() == 3540


def test_timezone_aware_timestamps_are_stored_as_utc(
    reconciler, db_session, device: Device, base_time
) -> None:
    reconciler.reconcile(device, [base_time.replace(tzinfo=UTC)])

    (beat,) = db_session.query(Beat).all()
    assert beat.timestamp == base_time


def test_other_devices_absences_are_untouched(
    reconciler, db_session, device: Device, other_device: Device, base_time
) -> None:
    begin, end = add_beats(db_session, other_device, base_time, base_time + days(1))
    theirs = add_absence(db_session, begin, end)

    reconciler.reconcile(device, [base_time + timedelta(hours=12)])

    (absence,) = absences(db_session)
    assert absence.id == theirs.id


def test_storage_failure_rolls_back_deletions(
    reconciler, db_session, device: Device, base_time, monkeypatch
) -> None:
    begin, end = add_beats(db_session, device, base_time, base_time + days(1))
    add_absence(db_session, begin, end)

    def _fail(self, begin, end):
        raise IntegrityError("INSERT INTO absences", {}, Exception("constraint failed"))

    monkeypatch.setattr(IntervalStore, "create", _fail)

    with pytest.raises(StorageError):
        reconciler.reconcile(device, [base_time + timedelta(hours=12)])

    assert count(db_session, Beat) == 2
    assert count(db_session, Absence) == 1
    assert beat_count(db_session, device) == 0
    assert reconciler.watermark.read() == 0


def test_failed_batch_leaves_watermark_untouched(
    reconciler, db_session, device: Device, base_time, monkeypatch
) -> None:
    add_beats(db_session, device, base_time)

    def _fail(self, begin, end):
        raise IntegrityError("INSERT INTO absences", {}, Exception("constraint failed"))

    monkeypatch.setattr(IntervalStore, "create", _fail)

    with pytest.raises(StorageError):
        reconciler.reconcile(device, [base_time + days(5)])

    assert count(db_session, Beat) == 1
    assert reconciler.watermark.read() == 0

    monkeypatch.undo()
    reconciler.reconcile(device, [base_time + days(5)])

    assert reconciler.watermark.read() == 5 * 86400
