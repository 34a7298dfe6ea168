# calgrid/layout.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .classify import is_multi_day, sort_key
from .model import CalendarEvent
from .interval import clip, minutes_between
from .util.dates import calendar_day, start_of_day
from .views import DayBucket

# Multi-day bars are drawn per day cell; middle and edge segments reach past
# the cell border by these amounts so adjacent segments read as one bar.
OVERLAP_LEFT_PX = 4
OVERLAP_RIGHT_PX = 5


@dataclass(frozen=True)
class LanePlacement:
    event: CalendarEvent
    lane: int
    total_lanes: int     # lanes used by this event's overlap cluster
    cluster_id: int

    @property
    def overlap(self) -> bool:
        return self.total_lanes > 1


def assign_lanes(events: Sequence[CalendarEvent]) -> List[LanePlacement]:
    """Greedy first-fit lane assignment over half-open [start, end) intervals.

    Events are ordered by start (multi-day first on ties, input order
    otherwise) and each goes to the first lane whose last event ends at or
    before its start. Sorted first-fit uses the minimum number of lanes.
    """
    items = sorted(events, key=sort_key)

    groups: List[List[CalendarEvent]] = []
    cur: List[CalendarEvent] = []
    max_end: dt.datetime | None = None
    for ev in items:
        if not cur:
            cur = [ev]
            max_end = ev.end
            continue
        if ev.start < max_end:
            cur.append(ev)
            max_end = max(max_end, ev.end)
        else:
            groups.append(cur)
            cur = [ev]
            max_end = ev.end
    if cur:
        groups.append(cur)

    out: List[LanePlacement] = []
    for cluster_id, g in enumerate(groups):
        lanes: List[dt.datetime] = []
        assigned: List[Tuple[CalendarEvent, int]] = []
        for ev in g:
            lane_index = -1
            for i, lane_end in enumerate(lanes):
                if lane_end <= ev.start:
                    lane_index = i
                    break
            if lane_index < 0:
                lane_index = len(lanes)
                lanes.append(ev.end)
            else:
                lanes[lane_index] = ev.end
            assigned.append((ev, lane_index))
        total = max(1, len(lanes))
        for ev, lane_index in assigned:
            out.append(LanePlacement(event=ev, lane=lane_index, total_lanes=total, cluster_id=cluster_id))
    return out


def lane_count(events: Sequence[CalendarEvent]) -> int:
    placements = assign_lanes(events)
    return max((p.lane + 1 for p in placements), default=0)


# --- multi-day segment styling --------------------------------------------
@dataclass(frozen=True)
class SegmentStyle:
    is_first_day: bool
    is_last_day: bool
    round_left: bool
    round_right: bool
    overlap_left_px: int
    overlap_right_px: int

    @property
    def is_middle(self) -> bool:
        return not self.is_first_day and not self.is_last_day


def segment_style(event: CalendarEvent, day: dt.date) -> SegmentStyle:
    first = calendar_day(event.start) == calendar_day(day)
    last = calendar_day(event.end) == calendar_day(day)
    if first and last:
        return SegmentStyle(True, True, True, True, 0, 0)
    if first:
        return SegmentStyle(True, False, True, False, 0, OVERLAP_RIGHT_PX)
    if last:
        return SegmentStyle(False, True, False, True, OVERLAP_LEFT_PX, 0)
    return SegmentStyle(False, False, False, False, OVERLAP_LEFT_PX, OVERLAP_RIGHT_PX)


@dataclass(frozen=True)
class DaySegment:
    event: CalendarEvent
    day: dt.date
    style: SegmentStyle


def segments_for_days(event: CalendarEvent, days: Sequence[dt.date]) -> List[DaySegment]:
    """One segment per day in `days` that the event touches."""
    s_day = calendar_day(event.start)
    e_day = calendar_day(event.end)
    return [DaySegment(event, d, segment_style(event, d)) for d in days if s_day <= d <= e_day]


# --- week rows (month grid) -----------------------------------------------
@dataclass(frozen=True)
class WeekRowBar:
    event: CalendarEvent
    start_col: int
    span: int
    lane: int
    continues_before: bool   # event started before this row
    continues_after: bool    # event ends after this row


def layout_week_row(events: Sequence[CalendarEvent], week_days: Sequence[dt.date]) -> List[WeekRowBar]:
    """Place multi-day events as continuous bars across one row of days.

    Lanes are assigned at day granularity: two bars collide when they share
    any column.
    """
    if not week_days:
        return []
    row_first = week_days[0]
    row_last = week_days[-1]

    candidates = [
        e for e in sorted(events, key=sort_key)
        if is_multi_day(e) and calendar_day(e.start) <= row_last and calendar_day(e.end) >= row_first
    ]

    lanes: List[int] = []  # last occupied column per lane
    bars: List[WeekRowBar] = []
    for ev in candidates:
        s_day = max(calendar_day(ev.start), row_first)
        e_day = min(calendar_day(ev.end), row_last)
        start_col = (s_day - row_first).days
        end_col = (e_day - row_first).days
        lane_index = -1
        for i, last_col in enumerate(lanes):
            if last_col < start_col:
                lane_index = i
                break
        if lane_index < 0:
            lane_index = len(lanes)
            lanes.append(end_col)
        else:
            lanes[lane_index] = end_col
        bars.append(
            WeekRowBar(
                event=ev,
                start_col=start_col,
                span=end_col - start_col + 1,
                lane=lane_index,
                continues_before=calendar_day(ev.start) < row_first,
                continues_after=calendar_day(ev.end) > row_last,
            )
        )
    return bars


# --- time grid (day / week columns) ---------------------------------------
@dataclass(frozen=True)
class TimedBlock:
    event: CalendarEvent
    lane: int
    total_lanes: int
    top_min: int      # minutes from midnight of the column day
    height_min: int


@dataclass(frozen=True)
class DayColumn:
    day: dt.date
    all_day: Tuple[DaySegment, ...]
    timed: Tuple[TimedBlock, ...]


def layout_day_column(bucket: DayBucket) -> DayColumn:
    """Split a day bucket into the all-day strip and lane-assigned timed blocks."""
    day = bucket.day
    all_day = tuple(
        DaySegment(e, day, segment_style(e, day)) for e in bucket.touching if is_multi_day(e)
    )

    lo = start_of_day(day)
    hi = lo + dt.timedelta(days=1)
    timed_events = [e for e in bucket.starting if not is_multi_day(e)]
    blocks: List[TimedBlock] = []
    for p in assign_lanes(timed_events):
        iv = clip(p.event.start, p.event.end, lo, hi)
        if iv is None:
            s, e = p.event.start, p.event.start
        else:
            s, e = iv
        blocks.append(
            TimedBlock(
                event=p.event,
                lane=p.lane,
                total_lanes=p.total_lanes,
                top_min=minutes_between(lo, s),
                height_min=max(1, minutes_between(s, e)),
            )
        )
    return DayColumn(day=day, all_day=all_day, timed=tuple(blocks))


def fit_count(cell_height_px: int, event_height_px: int, event_gap_px: int) -> int:
    """How many stacked event chips fit in a month cell."""
    slot = int(event_height_px) + int(event_gap_px)
    if slot <= 0:
        return 0
    return max(0, int(cell_height_px) // slot)


def split_overflow(events: Sequence[CalendarEvent], limit: int) -> Tuple[Tuple[CalendarEvent, ...], int]:
    """Events that fit plus the count of hidden ones ("+N more")."""
    if limit < 0:
        limit = 0
    if len(events) <= limit:
        return tuple(events), 0
    # Reserve one row for the "+N more" marker.
    keep = max(0, limit - 1)
    return tuple(events[:keep]), len(events) - keep
