"""calgrid.api

Stable *library* entrypoint for calgrid.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from calgrid.classify import days_spanned, is_multi_day, normalize_all_day, touches_day
from calgrid.config import ConfigError, load_cfg
from calgrid.editing import EventForm, build_event, default_form, form_from_event, validate_form
from calgrid.interaction import create_event, move_event, move_event_to_day, nudge_event, resize_event
from calgrid.interval import snap_minutes
from calgrid.layout import assign_lanes, layout_day_column, layout_week_row, segment_style, segments_for_days
from calgrid.model import CalendarEvent, EditResult, GestureResult, ViewState
from calgrid.palette import ColorVisibility, color_styles
from calgrid.payload import build_view_payload, load_events_from_json
from calgrid.session import CalendarCallbacks, CalendarSession, KeyEvent, installed_shortcuts
from calgrid.validate import EventValidationError, validate_events
from calgrid.views import bucket_day, navigate, select_view, view_title


# --- Public API exports (locked by contract tests) ------------------------
# Keep changes intentional and reviewable.
# Prefer append-only unless you are intentionally reshaping the public surface.
_PUBLIC_EXPORTS = (
    "CalendarCallbacks",
    "CalendarEvent",
    "CalendarSession",
    "ColorVisibility",
    "ConfigError",
    "EditResult",
    "EventForm",
    "EventValidationError",
    "GestureResult",
    "KeyEvent",
    "ViewState",
    "assign_lanes",
    "bucket_day",
    "build_event",
    "build_view_payload",
    "color_styles",
    "create_event",
    "days_spanned",
    "default_form",
    "form_from_event",
    "installed_shortcuts",
    "is_multi_day",
    "layout_day_column",
    "layout_week_row",
    "load_cfg",
    "load_events_from_json",
    "move_event",
    "move_event_to_day",
    "navigate",
    "normalize_all_day",
    "nudge_event",
    "resize_event",
    "segment_style",
    "segments_for_days",
    "select_view",
    "snap_minutes",
    "touches_day",
    "validate_events",
    "validate_form",
    "view_title",
)

__all__ = [n for n in _PUBLIC_EXPORTS if n in globals()]
# --- /Public API exports --------------------------------------------------
