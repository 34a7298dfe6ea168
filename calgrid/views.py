# calgrid/views.py
"""View selection: which days a view shows and which events land on each day.

Every view mode resolves through the `VIEW_WINDOWS` table; adding a mode
without a window function fails at import time.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .classify import is_multi_day, sort_key, starts_on, touches_day
from .config import cfg_int
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
from .palette import ColorVisibility
from .util.dates import (
    add_months,
    add_weeks,
    day_range,
    end_of_month,
    end_of_week,
    is_same_month,
    iter_days,
    start_of_month,
    start_of_week,
    weekday_sun0,
)

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAY_SHORT = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class DayBucket:
    day: dt.date
    starting: Tuple[CalendarEvent, ...]   # events whose start falls on `day`
    touching: Tuple[CalendarEvent, ...]   # events that start, end or pass through `day`

    @property
    def spanning(self) -> Tuple[CalendarEvent, ...]:
        """Multi-day events touching `day` that started on an earlier day."""
        return tuple(e for e in self.touching if is_multi_day(e) and not starts_on(e, self.day))

    @property
    def is_empty(self) -> bool:
        return not self.touching


@dataclass(frozen=True)
class ViewModel:
    state: ViewState
    days: Tuple[dt.date, ...]
    buckets: Tuple[DayBucket, ...]

    @property
    def view(self) -> str:
        return self.state.view

    def bucket_for(self, day: dt.date) -> Optional[DayBucket]:
        for b in self.buckets:
            if b.day == day:
                return b
        return None

    def weeks(self) -> List[Tuple[dt.date, ...]]:
        """Chunk the window into rows of 7 days (month grid rows)."""
        return [tuple(self.days[i:i + 7]) for i in range(0, len(self.days), 7)]


# --- window functions -----------------------------------------------------
def _day_window(current: dt.date, cfg: CalendarConfig) -> List[dt.date]:
    return [current]


def _week_window(current: dt.date, cfg: CalendarConfig) -> List[dt.date]:
    return day_range(start_of_week(current, cfg_int(cfg, "week_starts_on")), 7)


def _month_window(current: dt.date, cfg: CalendarConfig) -> List[dt.date]:
    ws = cfg_int(cfg, "week_starts_on")
    first = start_of_week(start_of_month(current), ws)
    last = end_of_week(end_of_month(current), ws)
    return list(iter_days(first, last))


def _agenda_window(current: dt.date, cfg: CalendarConfig) -> List[dt.date]:
    return day_range(current, cfg_int(cfg, "agenda_days"))


WindowFn = Callable[[dt.date, CalendarConfig], List[dt.date]]

VIEW_WINDOWS: Dict[str, WindowFn] = {
    VIEW_DAY: _day_window,
    VIEW_WEEK: _week_window,
    VIEW_MONTH: _month_window,
    VIEW_AGENDA: _agenda_window,
}

if set(VIEW_WINDOWS) != set(VIEWS):
    raise RuntimeError(f"VIEW_WINDOWS must cover every view exactly (have {sorted(VIEW_WINDOWS)}, views {sorted(VIEWS)})")


def view_window(state: ViewState, cfg: Optional[CalendarConfig] = None) -> List[dt.date]:
    return VIEW_WINDOWS[state.view](state.current_date, cfg or {})


# --- bucketing ------------------------------------------------------------
def sort_events(events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
    """Start ascending; multi-day before single-day on equal start; otherwise stable."""
    return sorted(events, key=sort_key)


def visible_events(
    events: Iterable[CalendarEvent],
    visibility: Optional[ColorVisibility] = None,
) -> List[CalendarEvent]:
    if visibility is None:
        return list(events)
    return [e for e in events if visibility.is_visible(e.color)]


def bucket_day(
    events: Sequence[CalendarEvent],
    day: dt.date,
    visibility: Optional[ColorVisibility] = None,
) -> DayBucket:
    vis = visible_events(events, visibility)
    touching = sort_events(e for e in vis if touches_day(e, day))
    starting = [e for e in touching if starts_on(e, day)]
    return DayBucket(day=day, starting=tuple(starting), touching=tuple(touching))


def select_view(
    events: Sequence[CalendarEvent],
    state: ViewState,
    cfg: Optional[CalendarConfig] = None,
    visibility: Optional[ColorVisibility] = None,
) -> ViewModel:
    """Resolve the days of the active view and bucket events per day.

    Agenda drops days without any visible event.
    """
    days = view_window(state, cfg)
    vis = visible_events(events, visibility)
    buckets = [bucket_day(vis, d) for d in days]
    if state.view == VIEW_AGENDA:
        buckets = [b for b in buckets if not b.is_empty]
        days = [b.day for b in buckets]
    return ViewModel(state=state, days=tuple(days), buckets=tuple(buckets))


# --- navigation -----------------------------------------------------------
def navigate(state: ViewState, step: int, cfg: Optional[CalendarConfig] = None) -> ViewState:
    """Move the anchor one view-length forward (step=1) or back (step=-1)."""
    cur = state.current_date
    if state.view == VIEW_MONTH:
        nxt = add_months(cur, step)
    elif state.view == VIEW_WEEK:
        nxt = add_weeks(cur, step)
    elif state.view == VIEW_DAY:
        nxt = cur + dt.timedelta(days=step)
    else:
        nxt = cur + dt.timedelta(days=step * cfg_int(cfg, "agenda_days"))
    return dataclasses.replace(state, current_date=nxt)


def go_today(state: ViewState, today: dt.date) -> ViewState:
    return dataclasses.replace(state, current_date=today)


def set_view(state: ViewState, view: str) -> ViewState:
    if view == state.view:
        return state
    return ViewState(current_date=state.current_date, view=view)


def _range_title(start: dt.date, end: dt.date) -> str:
    if is_same_month(start, end):
        return f"{MONTH_NAMES[start.month - 1]} {start.year}"
    return f"{MONTH_NAMES[start.month - 1][:3]} - {MONTH_NAMES[end.month - 1][:3]} {end.year}"


def view_title(state: ViewState, cfg: Optional[CalendarConfig] = None) -> str:
    cur = state.current_date
    if state.view == VIEW_MONTH:
        return f"{MONTH_NAMES[cur.month - 1]} {cur.year}"
    if state.view == VIEW_WEEK:
        ws = cfg_int(cfg, "week_starts_on")
        return _range_title(start_of_week(cur, ws), end_of_week(cur, ws))
    if state.view == VIEW_DAY:
        wd = WEEKDAY_SHORT[weekday_sun0(cur)]
        return f"{wd} {MONTH_NAMES[cur.month - 1]} {cur.day}, {cur.year}"
    end = cur + dt.timedelta(days=cfg_int(cfg, "agenda_days") - 1)
    return _range_title(cur, end)
