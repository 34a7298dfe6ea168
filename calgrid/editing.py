# calgrid/editing.py
"""Event edit form: string fields in, validated CalendarEvent out."""

from __future__ import annotations

import dataclasses
import datetime as dt
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional

from .classify import normalize_all_day
from .config import cfg_int
from .model import DEFAULT_COLOR, PLACEHOLDER_TITLE, CalendarConfig, CalendarEvent, EditResult
from .palette import DEFAULT_PALETTE, PaletteEntry, is_hex_color
from .util.dates import end_of_day, start_of_day
from .util.timeparse import format_date_input, format_hhmm, parse_date_yyyy_mm_dd, parse_hhmm

IdFactory = Callable[[], str]


def new_event_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class EventForm:
    title: str = ""
    start_date: str = ""   # YYYY-MM-DD
    end_date: str = ""
    start_time: str = ""   # HH:MM, ignored when all_day
    end_time: str = ""
    all_day: bool = False
    description: str = ""
    location: str = ""
    color: str = DEFAULT_COLOR


def _format_time_floor(ts: dt.datetime, snap_min: int) -> str:
    return format_hhmm(ts.hour, (ts.minute // snap_min) * snap_min)


def form_from_event(event: CalendarEvent, cfg: Optional[CalendarConfig] = None) -> EventForm:
    """Prefill the form; time pickers only offer snap-sized steps so minutes are floored."""
    snap = cfg_int(cfg, "snap_min")
    return EventForm(
        title=event.title or "",
        start_date=format_date_input(event.start.date()),
        end_date=format_date_input(event.end.date()),
        start_time=_format_time_floor(event.start, snap),
        end_time=_format_time_floor(event.end, snap),
        all_day=bool(event.all_day),
        description=event.description or "",
        location=event.location or "",
        color=event.color or DEFAULT_COLOR,
    )


def default_form(today: dt.date, cfg: Optional[CalendarConfig] = None) -> EventForm:
    return EventForm(
        start_date=format_date_input(today),
        end_date=format_date_input(today),
        start_time=format_hhmm(cfg_int(cfg, "default_start_hour"), 0),
        end_time=format_hhmm(cfg_int(cfg, "default_end_hour"), 0),
    )


def _is_known_color(color: str, palette: tuple[PaletteEntry, ...]) -> bool:
    return is_hex_color(color) or any(p.name == color for p in palette)


def validate_form(form: EventForm, palette: tuple[PaletteEntry, ...] = DEFAULT_PALETTE) -> List[str]:
    """Return human-readable errors; an empty list means the form can be built.

    An empty title is not an error: it is replaced by a placeholder on build.
    """
    errs: List[str] = []

    start_d = end_d = None
    try:
        start_d = parse_date_yyyy_mm_dd(form.start_date)
    except ValueError:
        errs.append(f"start_date must be YYYY-MM-DD, got {form.start_date!r}")
    try:
        end_d = parse_date_yyyy_mm_dd(form.end_date)
    except ValueError:
        errs.append(f"end_date must be YYYY-MM-DD, got {form.end_date!r}")

    if start_d and end_d and end_d < start_d:
        errs.append("end_date cannot be before start_date")

    if not form.all_day:
        if not form.start_time.strip() or not form.end_time.strip():
            errs.append("start_time and end_time are required unless the event is all day")
        else:
            st = et = None
            try:
                st = parse_hhmm(form.start_time)
            except ValueError as ex:
                errs.append(f"start_time: {ex}")
            try:
                et = parse_hhmm(form.end_time)
            except ValueError as ex:
                errs.append(f"end_time: {ex}")
            if st and et and start_d and end_d:
                start = dt.datetime.combine(start_d, dt.time(*st))
                end = dt.datetime.combine(end_d, dt.time(*et))
                if end <= start:
                    errs.append("end must be after start")

    if form.color and not _is_known_color(form.color, palette):
        errs.append(f"color must be a palette name or #RGB/#RRGGBB hex, got {form.color!r}")

    return errs


def build_event(
    form: EventForm,
    event_id: str = "",
    palette: tuple[PaletteEntry, ...] = DEFAULT_PALETTE,
) -> EditResult:
    errs = validate_form(form, palette)
    if errs:
        return EditResult(ok=False, errors=tuple(errs))

    start_d = parse_date_yyyy_mm_dd(form.start_date)
    end_d = parse_date_yyyy_mm_dd(form.end_date)
    if form.all_day:
        start = start_of_day(start_d)
        end = end_of_day(end_d)
    else:
        start = dt.datetime.combine(start_d, dt.time(*parse_hhmm(form.start_time)))
        end = dt.datetime.combine(end_d, dt.time(*parse_hhmm(form.end_time)))

    event = CalendarEvent(
        id=event_id or "",
        title=form.title.strip() or PLACEHOLDER_TITLE,
        start=start,
        end=end,
        all_day=bool(form.all_day),
        color=form.color or DEFAULT_COLOR,
        description=form.description or None,
        location=form.location or None,
    )
    return EditResult(ok=True, event=event)


def prepare_for_save(event: CalendarEvent, id_factory: IdFactory = new_event_id) -> CalendarEvent:
    """Apply save-time policy: placeholder title, all-day bounds, id for new events."""
    title = (event.title or "").strip() or PLACEHOLDER_TITLE
    out = dataclasses.replace(event, title=title)
    out = normalize_all_day(out)
    if out.is_new:
        out = dataclasses.replace(out, id=id_factory())
    return out
