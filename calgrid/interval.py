# calgrid/interval.py
from __future__ import annotations

import datetime as dt

SNAP_MIN = 15
DEFAULT_DURATION_MIN = 60


def snap_minutes(ts: dt.datetime, snap_min: int = SNAP_MIN) -> dt.datetime:
    """Round the minute component to the nearest `snap_min` boundary.

    Round-half-up on the minute remainder: with 15-minute buckets a
    remainder below 7.5 rounds down (07:37 -> 07:30), anything else rounds
    up (07:38 -> 07:45, 07:52 -> 08:00). Seconds and microseconds are cleared.
    """
    base = ts.replace(second=0, microsecond=0)
    if snap_min <= 1:
        return base
    remainder = base.minute % snap_min
    if remainder == 0:
        return base
    if remainder * 2 < snap_min:
        return base - dt.timedelta(minutes=remainder)
    return base + dt.timedelta(minutes=snap_min - remainder)


def default_end(start: dt.datetime, duration_min: int = DEFAULT_DURATION_MIN) -> dt.datetime:
    return start + dt.timedelta(minutes=int(duration_min))


def overlaps(a_start: dt.datetime, a_end: dt.datetime, b_start: dt.datetime, b_end: dt.datetime) -> bool:
    """Half-open [start, end) intersection."""
    return a_start < b_end and b_start < a_end


def clip(start: dt.datetime, end: dt.datetime, lo: dt.datetime, hi: dt.datetime) -> tuple[dt.datetime, dt.datetime] | None:
    s = max(start, lo)
    e = min(end, hi)
    if e <= s:
        return None
    return s, e


def minutes_between(a: dt.datetime, b: dt.datetime) -> int:
    return int((b - a).total_seconds() // 60)
