# calgrid/payload.py
"""JSON boundary: events in, render model out."""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import orjson

from .classify import is_multi_day, normalize_all_day
from .config import cfg_int
from .layout import (
    DaySegment,
    TimedBlock,
    fit_count,
    layout_day_column,
    layout_week_row,
    segment_style,
    split_overflow,
)
from .model import (
    VIEW_AGENDA,
    VIEW_DAY,
    VIEW_MONTH,
    VIEW_WEEK,
    VIEWS,
    CalendarConfig,
    CalendarEvent,
    ViewState,
)
from .palette import DEFAULT_PALETTE, ColorVisibility, color_styles
from .util.console import obs_warn
from .util.dates import is_same_month
from .util.timeparse import parse_timestamp
from .validate import EventValidationError
from .views import ViewModel, select_view, view_title

JsonPath = Union[str, Path]
JsonDict = Dict[str, Any]


# --- events <-> dicts -----------------------------------------------------
def _opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v)
    return s if s else None


def event_from_dict(raw: Any) -> CalendarEvent:
    """Build an event from a JSON object; raises ValueError on malformed input."""
    if not isinstance(raw, dict):
        raise ValueError(f"event must be an object, got {type(raw).__name__}")
    if "start" not in raw or "end" not in raw:
        raise ValueError("event must include start and end")

    start = parse_timestamp(raw.get("start"))
    end = parse_timestamp(raw.get("end"))
    all_day = raw.get("all_day", raw.get("allDay", False))
    if not isinstance(all_day, bool):
        raise ValueError(f"all_day must be boolean, got {all_day!r}")
    if end < start:
        raise ValueError(f"end {end.isoformat()} precedes start {start.isoformat()}")

    ev = CalendarEvent(
        id=str(raw.get("id") or ""),
        title=str(raw.get("title") or ""),
        start=start,
        end=end,
        all_day=all_day,
        color=_opt_str(raw.get("color")),
        description=_opt_str(raw.get("description")),
        location=_opt_str(raw.get("location")),
        label=_opt_str(raw.get("label")),
    )
    return normalize_all_day(ev)


def _iso(ts: dt.datetime) -> str:
    return ts.isoformat(timespec="milliseconds")


def event_to_dict(event: CalendarEvent) -> JsonDict:
    out: JsonDict = {
        "id": event.id,
        "title": event.title,
        "start": _iso(event.start),
        "end": _iso(event.end),
        "all_day": bool(event.all_day),
        "multi_day": is_multi_day(event),
    }
    for k in ("color", "description", "location", "label"):
        v = getattr(event, k)
        if v is not None:
            out[k] = v
    return out


def events_from_list(items: Any, *, strict: bool = False) -> List[CalendarEvent]:
    if not isinstance(items, list):
        raise EventValidationError("events JSON must be a list (or an object with an 'events' list)")
    out: List[CalendarEvent] = []
    for i, raw in enumerate(items):
        try:
            out.append(event_from_dict(raw))
        except ValueError as ex:
            if strict:
                raise EventValidationError(f"events[{i}]: {ex}") from ex
            obs_warn("payload", f"skipping events[{i}]: {ex}")
    return out


def load_events_from_json(path: JsonPath, *, strict: bool = False) -> List[CalendarEvent]:
    """Load events from a JSON file.

    Accepted shapes:
      - [ {event}, ... ]
      - { "events": [ {event}, ... ] }

    Malformed entries are skipped (logged when CALGRID_OBS_LOG is on) unless
    strict=True, in which case the first one raises EventValidationError.
    """
    p = Path(path)
    try:
        obj = orjson.loads(p.read_bytes())
    except orjson.JSONDecodeError as ex:
        raise EventValidationError(f"{p}: invalid JSON: {ex}") from ex
    if isinstance(obj, dict):
        obj = obj.get("events")
    return events_from_list(obj, strict=strict)


# --- render model ---------------------------------------------------------
def _event_view(event: CalendarEvent, visibility: Optional[ColorVisibility]) -> JsonDict:
    d = event_to_dict(event)
    d["styles"] = color_styles(event.color, visibility.palette if visibility else DEFAULT_PALETTE)
    return d


def _segment_dict(seg: DaySegment, visibility: Optional[ColorVisibility]) -> JsonDict:
    st = seg.style
    return {
        "event": _event_view(seg.event, visibility),
        "is_first_day": st.is_first_day,
        "is_last_day": st.is_last_day,
        "round_left": st.round_left,
        "round_right": st.round_right,
        "overlap_left_px": st.overlap_left_px,
        "overlap_right_px": st.overlap_right_px,
    }


def _block_dict(b: TimedBlock, visibility: Optional[ColorVisibility]) -> JsonDict:
    return {
        "event": _event_view(b.event, visibility),
        "lane": b.lane,
        "total_lanes": b.total_lanes,
        "top_min": b.top_min,
        "height_min": b.height_min,
    }


def _columns_payload(vm: ViewModel, cfg: CalendarConfig, visibility: Optional[ColorVisibility]) -> JsonDict:
    cols = []
    for bucket in vm.buckets:
        col = layout_day_column(bucket)
        cols.append(
            {
                "date": col.day.isoformat(),
                "all_day": [_segment_dict(s, visibility) for s in col.all_day],
                "timed": [_block_dict(b, visibility) for b in col.timed],
            }
        )
    return {"columns": cols}


def _month_payload(vm: ViewModel, cfg: CalendarConfig, visibility: Optional[ColorVisibility]) -> JsonDict:
    limit = fit_count(
        cfg_int(cfg, "week_cells_height_px"),
        cfg_int(cfg, "event_height_px"),
        cfg_int(cfg, "event_gap_px"),
    )
    anchor = vm.state.current_date
    weeks = []
    for row in vm.weeks():
        cells = []
        row_events: Dict[int, CalendarEvent] = {}
        for day in row:
            bucket = vm.bucket_for(day)
            touching = bucket.touching if bucket else ()
            for e in touching:
                row_events.setdefault(id(e), e)
            shown, more = split_overflow(touching, limit)
            cells.append(
                {
                    "date": day.isoformat(),
                    "in_month": is_same_month(day, anchor),
                    "events": [
                        _segment_dict(DaySegment(e, day, segment_style(e, day)), visibility) for e in shown
                    ],
                    "more": more,
                }
            )
        bars = [
            {
                "event_id": b.event.id,
                "start_col": b.start_col,
                "span": b.span,
                "lane": b.lane,
                "continues_before": b.continues_before,
                "continues_after": b.continues_after,
            }
            for b in layout_week_row(list(row_events.values()), row)
        ]
        weeks.append({"days": cells, "bars": bars})
    return {"weeks": weeks}


def _agenda_payload(vm: ViewModel, cfg: CalendarConfig, visibility: Optional[ColorVisibility]) -> JsonDict:
    return {
        "sections": [
            {"date": b.day.isoformat(), "events": [_event_view(e, visibility) for e in b.touching]}
            for b in vm.buckets
        ]
    }


PayloadBuilder = Callable[[ViewModel, CalendarConfig, Optional[ColorVisibility]], JsonDict]

PAYLOAD_BUILDERS: Dict[str, PayloadBuilder] = {
    VIEW_DAY: _columns_payload,
    VIEW_WEEK: _columns_payload,
    VIEW_MONTH: _month_payload,
    VIEW_AGENDA: _agenda_payload,
}

if set(PAYLOAD_BUILDERS) != set(VIEWS):
    raise RuntimeError("PAYLOAD_BUILDERS must cover every view exactly")


def build_view_payload(
    events: Sequence[CalendarEvent],
    state: ViewState,
    cfg: Optional[CalendarConfig] = None,
    visibility: Optional[ColorVisibility] = None,
) -> JsonDict:
    """JSON-ready render model for the active view."""
    cfg = cfg or {}
    vm = select_view(events, state, cfg, visibility)
    out: JsonDict = {
        "view": state.view,
        "current_date": state.current_date.isoformat(),
        "title": view_title(state, cfg),
        "days": [d.isoformat() for d in vm.days],
    }
    out.update(PAYLOAD_BUILDERS[state.view](vm, cfg, visibility))
    return out


def dumps_payload(payload: JsonDict, *, indent: bool = False) -> str:
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(payload, option=option).decode("utf-8")
