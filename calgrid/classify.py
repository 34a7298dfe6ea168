# calgrid/classify.py
"""Single-day / multi-day classification.

Every module that needs to know whether an event spans days goes through
`is_multi_day`; nothing recomputes a day difference on its own.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
from typing import List, Tuple

from .model import CalendarEvent
from .util.dates import DateLike, calendar_day, end_of_day, iter_days, start_of_day


def is_multi_day(event: CalendarEvent) -> bool:
    return bool(event.all_day) or calendar_day(event.start) != calendar_day(event.end)


def days_spanned(event: CalendarEvent) -> List[dt.date]:
    return list(iter_days(event.start, event.end))


def starts_on(event: CalendarEvent, day: DateLike) -> bool:
    return calendar_day(event.start) == calendar_day(day)


def touches_day(event: CalendarEvent, day: DateLike) -> bool:
    """True when the event starts, ends or passes through `day`."""
    d = calendar_day(day)
    return calendar_day(event.start) <= d <= calendar_day(event.end)


def sort_key(event: CalendarEvent) -> Tuple[dt.datetime, int]:
    # Multi-day events sort before single-day events sharing the same start.
    return (event.start, 0 if is_multi_day(event) else 1)


def normalize_all_day(event: CalendarEvent) -> CalendarEvent:
    """Snap an all-day event to 00:00:00.000 .. 23:59:59.999; timed events pass through."""
    if not event.all_day:
        return event
    start = start_of_day(event.start)
    end = end_of_day(event.end)
    if start == event.start and end == event.end:
        return event
    return dataclasses.replace(event, start=start, end=end)
