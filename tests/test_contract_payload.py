from __future__ import annotations

import datetime as dt
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import orjson

from calgrid.model import CalendarEvent, ViewState
from calgrid.palette import ColorVisibility
from calgrid.payload import build_view_payload, dumps_payload, event_from_dict, event_to_dict, load_events_from_json
from calgrid.validate import EventValidationError

D = dt.datetime

_EVENTS = [
    {"id": "a", "title": "Standup", "start": "2024-03-15T09:00:00", "end": "2024-03-15T09:30:00", "color": "blue"},
    {"id": "b", "title": "Offsite", "start": "2024-03-12T09:00:00", "end": "2024-03-14T17:00:00", "color": "orange"},
    {"id": "c", "title": "Holiday", "start": "2024-03-18", "end": "2024-03-18", "allDay": True, "color": "rose"},
]


class TestEventDictContract(unittest.TestCase):
    def test_event_from_dict_accepts_camel_all_day_and_normalizes(self) -> None:
        ev = event_from_dict(_EVENTS[2])
        self.assertTrue(ev.all_day)
        self.assertEqual(ev.start, D(2024, 3, 18))
        self.assertEqual(ev.end, D(2024, 3, 18, 23, 59, 59, 999000))

    def test_event_from_dict_drops_utc_suffix(self) -> None:
        ev = event_from_dict({"start": "2024-03-15T09:00:00Z", "end": "2024-03-15T10:00:00Z"})
        self.assertEqual(ev.start, D(2024, 3, 15, 9))
        self.assertIsNone(ev.start.tzinfo)
        self.assertEqual(ev.id, "")

    def test_event_from_dict_rejects_malformed(self) -> None:
        for raw in (
            [],
            {"start": "2024-03-15T09:00:00"},
            {"start": "yesterday", "end": "2024-03-15T10:00:00"},
            {"start": "2024-03-15T10:00:00", "end": "2024-03-15T09:00:00"},
            {"start": "2024-03-15T09:00:00", "end": "2024-03-15T10:00:00", "all_day": "yes"},
        ):
            with self.assertRaises(ValueError):
                event_from_dict(raw)

    def test_event_to_dict(self) -> None:
        ev = CalendarEvent(id="b", title="Offsite", start=D(2024, 3, 12, 9), end=D(2024, 3, 14, 17), location="HQ")
        d = event_to_dict(ev)
        self.assertEqual(d["start"], "2024-03-12T09:00:00.000")
        self.assertTrue(d["multi_day"])
        self.assertEqual(d["location"], "HQ")
        self.assertNotIn("color", d)


class TestLoadEventsContract(unittest.TestCase):
    def _write(self, td: str, obj) -> Path:
        p = Path(td) / "events.json"
        p.write_bytes(orjson.dumps(obj))
        return p

    def test_list_and_wrapped_shapes(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            self.assertEqual(len(load_events_from_json(self._write(td, _EVENTS))), 3)
            self.assertEqual(len(load_events_from_json(self._write(td, {"events": _EVENTS}))), 3)

    def test_malformed_entries_skipped_with_warning(self) -> None:
        bad = _EVENTS + [{"id": "z", "start": "nope", "end": "nope"}]
        with tempfile.TemporaryDirectory() as td:
            p = self._write(td, bad)
            with patch.dict(os.environ, {"CALGRID_OBS_LOG": "1"}), patch("calgrid.util.console.eprint") as ep:
                events = load_events_from_json(p)
            self.assertEqual([e.id for e in events], ["a", "b", "c"])
            combined = "\n".join(str(c.args[0]) for c in ep.call_args_list if c.args)
            self.assertIn("[calgrid.payload] WARN: skipping events[3]", combined)

            with self.assertRaises(EventValidationError):
                load_events_from_json(p, strict=True)

    def test_invalid_json_and_wrong_shape(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "broken.json"
            p.write_text("{not json", encoding="utf-8")
            with self.assertRaises(EventValidationError):
                load_events_from_json(p)
            with self.assertRaises(EventValidationError):
                load_events_from_json(self._write(td, {"items": []}))


class TestViewPayloadContract(unittest.TestCase):
    def setUp(self) -> None:
        self.events = [event_from_dict(e) for e in _EVENTS]

    def test_week_payload_columns(self) -> None:
        out = build_view_payload(self.events, ViewState(dt.date(2024, 3, 15), "week"))
        self.assertEqual(out["view"], "week")
        self.assertEqual(out["title"], "March 2024")
        self.assertEqual(len(out["columns"]), 7)
        fri = out["columns"][5]
        self.assertEqual(fri["date"], "2024-03-15")
        self.assertEqual([b["event"]["id"] for b in fri["timed"]], ["a"])
        self.assertEqual(fri["timed"][0]["top_min"], 540)
        wed = out["columns"][3]
        self.assertEqual([s["event"]["id"] for s in wed["all_day"]], ["b"])
        self.assertEqual(wed["all_day"][0]["overlap_left_px"], 4)
        self.assertEqual(wed["all_day"][0]["overlap_right_px"], 5)

    def test_month_payload_shape(self) -> None:
        out = build_view_payload(self.events, ViewState(dt.date(2024, 3, 15), "month"))
        self.assertEqual(len(out["weeks"]), 6)
        for week in out["weeks"]:
            self.assertEqual(len(week["days"]), 7)
        first = out["weeks"][0]["days"][0]
        self.assertEqual(first["date"], "2024-02-25")
        self.assertFalse(first["in_month"])
        bar_ids = [b["event_id"] for w in out["weeks"] for b in w["bars"]]
        self.assertEqual(bar_ids, ["b"])

    def test_month_bars_keep_identical_unsaved_events_apart(self) -> None:
        drafts = [
            CalendarEvent(id="", title="Trip", start=D(2024, 3, 12, 9), end=D(2024, 3, 14, 17)),
            CalendarEvent(id="", title="Trip", start=D(2024, 3, 12, 9), end=D(2024, 3, 14, 17)),
        ]
        out = build_view_payload(drafts, ViewState(dt.date(2024, 3, 15), "month"))
        bars = [b for w in out["weeks"] for b in w["bars"]]
        self.assertEqual(len(bars), 2)
        self.assertEqual(sorted(b["lane"] for b in bars), [0, 1])

    def test_agenda_payload_respects_visibility(self) -> None:
        vis = ColorVisibility.from_palette().toggle("rose")
        out = build_view_payload(self.events, ViewState(dt.date(2024, 3, 10), "agenda"), visibility=vis)
        dates = [s["date"] for s in out["sections"]]
        self.assertEqual(dates, ["2024-03-12", "2024-03-13", "2024-03-14", "2024-03-15"])
        self.assertEqual(out["days"], dates)

    def test_dumps_payload(self) -> None:
        out = build_view_payload(self.events, ViewState(dt.date(2024, 3, 15), "day"))
        text = dumps_payload(out, indent=True)
        self.assertIn("\n  ", text)
        self.assertEqual(orjson.loads(text), out)


if __name__ == "__main__":
    unittest.main(verbosity=2)
