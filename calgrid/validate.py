"""Event collection validation helpers (library-facing)."""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Sequence

from .model import CalendarEvent


class EventValidationError(ValueError):
    """Raised when an event collection fails validation."""


def _require(cond: bool, msg: str, errs: List[str]) -> None:
    if not cond:
        errs.append(msg)


def validate_event(event: Any, *, label: str = "event") -> List[str]:
    errs: List[str] = []
    if not isinstance(event, CalendarEvent):
        return [f"{label}: must be CalendarEvent, got {type(event).__name__}"]

    _require(isinstance(event.id, str), f"{label}: id must be string", errs)
    _require(isinstance(event.title, str), f"{label}: title must be string", errs)
    start_ok = isinstance(event.start, dt.datetime)
    end_ok = isinstance(event.end, dt.datetime)
    _require(start_ok, f"{label}: start must be datetime", errs)
    _require(end_ok, f"{label}: end must be datetime", errs)
    if start_ok and end_ok:
        _require(
            event.start.tzinfo is None and event.end.tzinfo is None,
            f"{label}: start/end must be naive wall-clock datetimes",
            errs,
        )
        if event.start.tzinfo is None and event.end.tzinfo is None:
            _require(event.end >= event.start, f"{label}: end must not precede start", errs)
    return errs


def validate_events(events: Sequence[Any], *, label: str = "events") -> List[str]:
    if not isinstance(events, (list, tuple)):
        return [f"{label}: must be a list of events"]

    errs: List[str] = []
    seen: Dict[str, int] = {}
    for i, ev in enumerate(events):
        errs.extend(validate_event(ev, label=f"{label}[{i}]"))
        eid = getattr(ev, "id", None)
        if isinstance(eid, str) and eid:
            if eid in seen:
                errs.append(f"{label}[{i}]: duplicate id {eid!r} (first at index {seen[eid]})")
            else:
                seen[eid] = i
    return errs


def assert_valid_events(events: Sequence[Any]) -> None:
    errs = validate_events(events)
    if errs:
        raise EventValidationError(errs[0])


__all__ = [
    "EventValidationError",
    "assert_valid_events",
    "validate_event",
    "validate_events",
]
