"""Layout computations for the graph page.

Positions are percentages of the row width so the template only has to
drop them into inline styles.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from heartbeat_tracker.db.time import as_utc
from heartbeat_tracker.models import Absence, Beat, Device
from heartbeat_tracker.utils.days import day_range, same_day, start_of_day
from heartbeat_tracker.utils.humanize import format_relative

__all__ = [
    "TIME_FORMAT",
    "AbsenceSegment",
    "DayRow",
    "DeviceRow",
    "Tick",
    "BeatStrip",
    "absence_chart",
    "beat_strip",
]

TIME_FORMAT = "%Y/%m/%d %H:%M UTC"
_DAY_SECONDS = 86_400
_QUARTER_HOURS = (6, 12, 18)


def _day_position(instant: datetime) -> float:
    midnight = start_of_day(instant)
    return 100.0 * (instant - midnight).total_seconds() / _DAY_SECONDS


@dataclass(frozen=True)
class AbsenceSegment:
    """The part of one absence drawn on one day row."""

    left: float
    width: float
    title: str
    start: float | None = None
    start_title: str | None = None
    end: float | None = None
    end_title: str | None = None


@dataclass
class DayRow:
    day: datetime
    segments: list[AbsenceSegment] = field(default_factory=list)


def _describe(start: datetime, end: datetime, duration: int) -> str:
    return (
        f"From {start.strftime(TIME_FORMAT)} to {end.strftime(TIME_FORMAT)} "
        f"of {format_relative(duration)}"
    )


def absence_chart(absences: Sequence[Absence]) -> list[DayRow]:
    """Lay absences out on one row per day, newest day first.

    An absence spanning several days is clipped to each day it overlaps.
    """
    if not absences:
        return []

    spans = sorted(
        ((as_utc(a.start), as_utc(a.timestamp), a.duration) for a in absences),
        key=lambda span: span[0],
    )
    first_day = min(start for start, _, _ in spans)
    last_day = max(end for _, end, _ in spans)

    rows = []
    for day in day_range(first_day, last_day):
        next_day = day + timedelta(days=1)
        row = DayRow(day=day)
        for start, end, duration in spans:
            if start >= next_day or end < day:
                continue
            seg_start = start if same_day(start, day) else day
            seg_end = end if same_day(end, day) else next_day
            row.segments.append(
                AbsenceSegment(
                    left=_day_position(seg_start),
                    width=100.0 * (seg_end - seg_start).total_seconds() / _DAY_SECONDS,
                    title=_describe(start, end, duration),
                    start=_day_position(start) if same_day(start, day) else None,
                    start_title=start.strftime(TIME_FORMAT),
                    end=_day_position(end) if same_day(end, day) else None,
                    end_title=end.strftime(TIME_FORMAT),
                )
            )
        rows.append(row)
    rows.reverse()
    return rows


@dataclass(frozen=True)
class Tick:
    position: float
    label: str | None = None


@dataclass(frozen=True)
class DeviceRow:
    name: str
    beats: list[Tick]


@dataclass(frozen=True)
class BeatStrip:
    labels: list[Tick]
    dots: list[Tick]
    rows: list[DeviceRow]


def beat_strip(beats: Sequence[Beat], devices: Sequence[Device], now: datetime) -> BeatStrip | None:
    """Place recent beats on a shared time axis running from the oldest beat to ``now``."""
    if not beats:
        return None

    now = as_utc(now)
    oldest = min(as_utc(b.timestamp) for b in beats)
    span = (now - oldest).total_seconds()

    def pos(instant: datetime) -> float:
        if span <= 0:
            return 0.0
        return 100.0 * (instant - oldest).total_seconds() / span

    labels = []
    dots = []
    for day in day_range(oldest, now):
        if oldest < day < now:
            labels.append(Tick(pos(day), day.strftime("%m/%d")))
            dots.append(Tick(pos(day)))
        for hour in _QUARTER_HOURS:
            mark = day.replace(hour=hour)
            if oldest < mark < now:
                dots.append(Tick(pos(mark)))

    rows = [
        DeviceRow(
            name=device.name,
            beats=[
                Tick(pos(as_utc(b.timestamp)), as_utc(b.timestamp).strftime(TIME_FORMAT))
                for b in beats
                if b.device_id == device.id
            ],
        )
        for device in devices
    ]
    return BeatStrip(labels=labels, dots=dots, rows=rows)
