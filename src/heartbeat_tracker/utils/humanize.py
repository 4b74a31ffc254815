# src/heartbeat_tracker/utils/humanize.py
"""Human readable durations."""

from __future__ import annotations

# Calendar approximations: a year is 365.25 days, a month 30.44 days.
_YEAR = 31_557_600
_MONTH = 2_630_016
_DAY = 86_400
_HOUR = 3_600
_MINUTE = 60


def _plural(value: int, unit: str) -> str:
    return f"{value} {unit}{'s' if value > 1 else ''}"


def format_relative(seconds: int) -> str:
    """Format a duration such as ``1 year 3 months 6 days 9h 26m 13s``.

    Zero-valued components are omitted; a zero or negative duration reads
    ``just now``.
    """
    seconds = int(seconds)
    if seconds <= 0:
        return "just now"

    years, rest = divmod(seconds, _YEAR)
    months, rest = divmod(rest, _MONTH)
    days, rest = divmod(rest, _DAY)
    hours, rest = divmod(rest, _HOUR)
    minutes, secs = divmod(rest, _MINUTE)

    parts = []
    if years:
        parts.append(_plural(years, "year"))
    if months:
        parts.append(_plural(months, "month"))
    if days:
        parts.append(_plural(days, "day"))
    parts.extend(
        f"{value}{suffix}"
        for value, suffix in ((hours, "h"), (minutes, "m"), (secs, "s"))
        if value
    )
    return " ".join(parts)
