# calgrid/model.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

PLACEHOLDER_TITLE = "(no title)"
DEFAULT_COLOR = "#3b82f6"

VIEW_DAY = "day"
VIEW_WEEK = "week"
VIEW_MONTH = "month"
VIEW_AGENDA = "agenda"
VIEWS: Tuple[str, ...] = (VIEW_MONTH, VIEW_WEEK, VIEW_DAY, VIEW_AGENDA)

# Gesture failure kinds
ERR_INVALID_RANGE = "invalid_range"
ERR_INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    title: str
    start: dt.datetime
    end: dt.datetime
    all_day: bool = False
    color: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    label: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return not self.id

    @property
    def duration(self) -> dt.timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class ViewState:
    """Anchor date plus active view mode; owned by the caller."""

    current_date: dt.date
    view: str = VIEW_WEEK

    def __post_init__(self) -> None:
        if self.view not in VIEWS:
            raise ValueError(f"unknown view: {self.view!r} (expected one of {', '.join(VIEWS)})")


@dataclass(frozen=True)
class GestureResult:
    """Outcome of a create/move/resize gesture. Never raised, always returned."""

    ok: bool
    event: Optional[CalendarEvent] = None
    reason: Optional[str] = None
    error: Optional[str] = None  # "invalid_range" | "invalid_input"


@dataclass(frozen=True)
class EditResult:
    ok: bool
    event: Optional[CalendarEvent] = None
    errors: Tuple[str, ...] = ()


CalendarConfig = Dict[str, Any]


__all__ = [
    "CalendarConfig",
    "CalendarEvent",
    "DEFAULT_COLOR",
    "ERR_INVALID_INPUT",
    "ERR_INVALID_RANGE",
    "EditResult",
    "GestureResult",
    "PLACEHOLDER_TITLE",
    "VIEWS",
    "VIEW_AGENDA",
    "VIEW_DAY",
    "VIEW_MONTH",
    "VIEW_WEEK",
    "ViewState",
]
