# calgrid/session.py
"""Calendar surface controller.

The view state is an explicit value passed in by the caller; the session
reports changes through a single `on_state_change` callback and reports
event intents through `CalendarCallbacks`. It holds no event collection.
"""

from __future__ import annotations

import contextlib
import datetime as dt
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Sequence

from .classify import normalize_all_day
from .editing import IdFactory, new_event_id, prepare_for_save
from .interaction import create_event
from .model import (
    VIEW_AGENDA,
    VIEW_DAY,
    VIEW_MONTH,
    VIEW_WEEK,
    CalendarConfig,
    CalendarEvent,
    GestureResult,
    ViewState,
)
from .palette import ColorVisibility
from .views import ViewModel, go_today, navigate, select_view, set_view, view_title


class CalendarCallbacks(Protocol):
    def on_event_create(self, proposed_start: dt.datetime) -> None:
        """A new draft was opened at `proposed_start` (snapped)."""

    def on_event_update(self, event: CalendarEvent) -> None:
        """An existing event was edited or moved/resized."""

    def on_event_delete(self, event_id: str) -> None:
        """The user asked to delete a saved event."""

    def on_event_save(self, event: CalendarEvent) -> None:
        """A new event was saved; `event.id` has been assigned."""


class NoopCallbacks:
    """Baseline sink that ignores every intent."""

    def on_event_create(self, proposed_start: dt.datetime) -> None:
        return None

    def on_event_update(self, event: CalendarEvent) -> None:
        return None

    def on_event_delete(self, event_id: str) -> None:
        return None

    def on_event_save(self, event: CalendarEvent) -> None:
        return None


NOOP_CALLBACKS = NoopCallbacks()

StateListener = Callable[[ViewState], None]


class CalendarSession:
    def __init__(
        self,
        state: ViewState,
        *,
        cfg: Optional[CalendarConfig] = None,
        callbacks: Optional[CalendarCallbacks] = None,
        on_state_change: Optional[StateListener] = None,
        visibility: Optional[ColorVisibility] = None,
        id_factory: IdFactory = new_event_id,
    ) -> None:
        self._state = state
        self.cfg: CalendarConfig = dict(cfg or {})
        self.callbacks = callbacks or NOOP_CALLBACKS
        self._on_state_change = on_state_change
        self.visibility = visibility
        self._id_factory = id_factory
        self.draft: Optional[CalendarEvent] = None
        self.dialog_open = False

    # ------------------------------------------------------------ view state
    @property
    def state(self) -> ViewState:
        return self._state

    def sync(self, state: ViewState) -> None:
        """Adopt a state pushed by the owner (no callback)."""
        self._state = state

    def _update(self, new_state: ViewState) -> ViewState:
        if new_state != self._state:
            self._state = new_state
            if self._on_state_change is not None:
                self._on_state_change(new_state)
        return self._state

    def set_view(self, view: str) -> ViewState:
        return self._update(set_view(self._state, view))

    def next(self) -> ViewState:
        return self._update(navigate(self._state, 1, self.cfg))

    def previous(self) -> ViewState:
        return self._update(navigate(self._state, -1, self.cfg))

    def today(self, today: dt.date) -> ViewState:
        return self._update(go_today(self._state, today))

    @property
    def title(self) -> str:
        return view_title(self._state, self.cfg)

    def view_model(self, events: Sequence[CalendarEvent]) -> ViewModel:
        return select_view(events, self._state, self.cfg, self.visibility)

    # ------------------------------------------------------------ event intents
    def open_event(self, event: CalendarEvent) -> None:
        self.draft = event
        self.dialog_open = True

    def open_new(self, pointer_time: Any) -> GestureResult:
        res = create_event(pointer_time, self.cfg)
        if res.ok and res.event is not None:
            self.open_event(res.event)
            self.callbacks.on_event_create(res.event.start)
        return res

    def close_dialog(self) -> None:
        self.draft = None
        self.dialog_open = False

    def save(self, event: CalendarEvent) -> CalendarEvent:
        was_new = event.is_new
        saved = prepare_for_save(event, self._id_factory)
        if was_new:
            self.callbacks.on_event_save(saved)
        else:
            self.callbacks.on_event_update(saved)
        self.close_dialog()
        return saved

    def delete(self, event_id: str) -> bool:
        self.close_dialog()
        if not event_id:
            return False
        self.callbacks.on_event_delete(event_id)
        return True

    def commit(self, result: GestureResult) -> bool:
        """Forward a successful move/resize proposal with all-day bounds enforced; failures are not forwarded."""
        if not result.ok or result.event is None:
            return False
        self.callbacks.on_event_update(normalize_all_day(result.event))
        return True


# --- keyboard shortcuts ---------------------------------------------------
SHORTCUTS: Dict[str, str] = {
    "m": VIEW_MONTH,
    "w": VIEW_WEEK,
    "d": VIEW_DAY,
    "a": VIEW_AGENDA,
}


@dataclass(frozen=True)
class KeyEvent:
    key: str
    target_editable: bool = False   # focus is in an input, textarea or contenteditable


class ShortcutDispatcher:
    """Maps a single key press to a view switch on a session."""

    def __init__(self, session: CalendarSession, mapping: Optional[Dict[str, str]] = None) -> None:
        self.session = session
        self.mapping = dict(SHORTCUTS if mapping is None else mapping)
        self._busy = False

    def __call__(self, ev: KeyEvent) -> bool:
        if self._busy:
            return False
        if self.session.dialog_open or ev.target_editable:
            return False
        view = self.mapping.get((ev.key or "").lower())
        if view is None:
            return False
        self._busy = True
        try:
            self.session.set_view(view)
        finally:
            self._busy = False
        return True


KeyListener = Callable[[KeyEvent], Any]


class ListenerRegistry:
    """Minimal key-listener host; UI toolkits supply their own equivalent."""

    def __init__(self) -> None:
        self._listeners: List[KeyListener] = []

    def add_listener(self, fn: KeyListener) -> None:
        self._listeners.append(fn)

    def remove_listener(self, fn: KeyListener) -> None:
        with contextlib.suppress(ValueError):
            self._listeners.remove(fn)

    @property
    def listeners(self) -> tuple[KeyListener, ...]:
        return tuple(self._listeners)

    def emit(self, ev: KeyEvent) -> None:
        for fn in list(self._listeners):
            fn(ev)


@contextlib.contextmanager
def installed_shortcuts(
    registry: ListenerRegistry,
    session: CalendarSession,
    mapping: Optional[Dict[str, str]] = None,
) -> Iterator[ShortcutDispatcher]:
    """Install the shortcut dispatcher for the lifetime of the calendar surface."""
    dispatcher = ShortcutDispatcher(session, mapping)
    registry.add_listener(dispatcher)
    try:
        yield dispatcher
    finally:
        registry.remove_listener(dispatcher)
