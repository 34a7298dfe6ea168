# calgrid/interaction.py
"""Pointer gestures -> proposed events.

Every gesture returns a GestureResult holding a *new* CalendarEvent; the
input event is never mutated and nothing is committed here. A cancelled
gesture is simply a result the caller does not commit.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
from typing import Any, Optional

from .config import cfg_int
from .interval import snap_minutes
from .model import (
    ERR_INVALID_INPUT,
    ERR_INVALID_RANGE,
    CalendarConfig,
    CalendarEvent,
    GestureResult,
)
from .util.console import obs_warn
from .util.dates import calendar_day, end_of_day, start_of_day
from .util.timeparse import parse_timestamp

EDGE_START = "start"
EDGE_END = "end"


def _fail(error: str, reason: str) -> GestureResult:
    obs_warn("interaction", f"gesture rejected ({error}): {reason}")
    return GestureResult(ok=False, event=None, reason=reason, error=error)


def _coerce(value: Any, what: str) -> tuple[Optional[dt.datetime], Optional[GestureResult]]:
    try:
        return parse_timestamp(value), None
    except ValueError as ex:
        return None, _fail(ERR_INVALID_INPUT, f"{what}: {ex}")


def snap_start(pointer_time: Any, cfg: Optional[CalendarConfig] = None) -> dt.datetime:
    """Snap a pointer timestamp to the configured granularity (raises ValueError on bad input)."""
    return snap_minutes(parse_timestamp(pointer_time), cfg_int(cfg, "snap_min"))


def create_event(pointer_time: Any, cfg: Optional[CalendarConfig] = None) -> GestureResult:
    """Click on empty grid space: an unsaved draft starting at the snapped time."""
    ts, err = _coerce(pointer_time, "create")
    if err:
        return err
    try:
        start = snap_minutes(ts, cfg_int(cfg, "snap_min"))
        end = start + dt.timedelta(minutes=cfg_int(cfg, "default_duration_min"))
    except OverflowError:
        return _fail(ERR_INVALID_INPUT, f"create: {ts.isoformat()} is out of the supported date range")
    draft = CalendarEvent(id="", title="", start=start, end=end, all_day=False)
    return GestureResult(ok=True, event=draft)


def nudge_event(event: CalendarEvent, delta: dt.timedelta) -> GestureResult:
    """Shift both ends by the same delta; duration is preserved exactly."""
    if not isinstance(delta, dt.timedelta):
        return _fail(ERR_INVALID_INPUT, f"nudge: delta must be timedelta, got {type(delta).__name__}")
    try:
        start, end = event.start + delta, event.end + delta
    except OverflowError:
        return _fail(ERR_INVALID_INPUT, f"nudge: shifting by {delta} is out of the supported date range")
    return GestureResult(ok=True, event=dataclasses.replace(event, start=start, end=end))


def _day_delta(event: CalendarEvent, target: dt.datetime) -> dt.timedelta:
    return dt.timedelta(days=(calendar_day(target) - calendar_day(event.start)).days)


def move_event(event: CalendarEvent, pointer_time: Any, cfg: Optional[CalendarConfig] = None) -> GestureResult:
    """Drag an event so it starts at the snapped pointer time.

    All-day events move by whole days and keep their day bounds.
    """
    ts, err = _coerce(pointer_time, "move")
    if err:
        return err
    if event.all_day:
        return nudge_event(event, _day_delta(event, ts))
    try:
        target = snap_minutes(ts, cfg_int(cfg, "snap_min"))
    except OverflowError:
        return _fail(ERR_INVALID_INPUT, f"move: {ts.isoformat()} is out of the supported date range")
    return nudge_event(event, target - event.start)


def move_event_to_day(event: CalendarEvent, day: Any) -> GestureResult:
    """Drop onto a day cell (month view): keep time of day and duration."""
    try:
        target = parse_timestamp(day)
    except ValueError as ex:
        return _fail(ERR_INVALID_INPUT, f"move to day: {ex}")
    return nudge_event(event, _day_delta(event, target))


def resize_event(
    event: CalendarEvent,
    edge: str,
    pointer_time: Any,
    cfg: Optional[CalendarConfig] = None,
) -> GestureResult:
    """Move one endpoint to the snapped pointer time; refuse end <= start.

    For all-day events the endpoint lands on the day boundary instead.
    """
    if edge not in (EDGE_START, EDGE_END):
        return _fail(ERR_INVALID_INPUT, f"resize: edge must be 'start' or 'end', got {edge!r}")
    ts, err = _coerce(pointer_time, "resize")
    if err:
        return err
    if event.all_day:
        target = start_of_day(ts) if edge == EDGE_START else end_of_day(ts)
    else:
        try:
            target = snap_minutes(ts, cfg_int(cfg, "snap_min"))
        except OverflowError:
            return _fail(ERR_INVALID_INPUT, f"resize: {ts.isoformat()} is out of the supported date range")

    start = target if edge == EDGE_START else event.start
    end = target if edge == EDGE_END else event.end
    if end <= start:
        return _fail(
            ERR_INVALID_RANGE,
            f"resize would end at {end.isoformat()} on or before start {start.isoformat()}",
        )
    return GestureResult(ok=True, event=dataclasses.replace(event, start=start, end=end))
