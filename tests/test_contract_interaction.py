from __future__ import annotations

import datetime as dt
import unittest

from calgrid.interaction import (
    create_event,
    move_event,
    move_event_to_day,
    nudge_event,
    resize_event,
    snap_start,
)
from calgrid.interval import snap_minutes
from calgrid.model import ERR_INVALID_INPUT, ERR_INVALID_RANGE, CalendarEvent

D = dt.datetime


def _ev(start: dt.datetime, end: dt.datetime, **kw) -> CalendarEvent:
    return CalendarEvent(id="e1", title="Standup", start=start, end=end, **kw)


class TestSnapContract(unittest.TestCase):
    def test_round_half_up_on_minute_remainder(self) -> None:
        cases = {
            (7, 30): (7, 30),
            (7, 29): (7, 30),
            (7, 22): (7, 15),
            (7, 23): (7, 30),
            (7, 37): (7, 30),
            (7, 38): (7, 45),
            (7, 52): (7, 45),
            (7, 53): (8, 0),
            (7, 0): (7, 0),
        }
        for (h, m), (eh, em) in cases.items():
            with self.subTest(time=f"{h:02d}:{m:02d}"):
                self.assertEqual(snap_minutes(D(2024, 3, 15, h, m)), D(2024, 3, 15, eh, em))

    def test_snap_clears_seconds(self) -> None:
        self.assertEqual(snap_minutes(D(2024, 3, 15, 7, 30, 45, 123)), D(2024, 3, 15, 7, 30))

    def test_snap_rolls_over_midnight(self) -> None:
        self.assertEqual(snap_minutes(D(2024, 3, 15, 23, 53)), D(2024, 3, 16, 0, 0))

    def test_snap_start_parses_strings(self) -> None:
        self.assertEqual(snap_start("2024-03-15T07:38:00"), D(2024, 3, 15, 7, 45))


class TestCreateContract(unittest.TestCase):
    def test_create_draft(self) -> None:
        res = create_event(D(2024, 3, 15, 7, 38))
        self.assertTrue(res.ok)
        ev = res.event
        self.assertEqual(ev.id, "")
        self.assertTrue(ev.is_new)
        self.assertFalse(ev.all_day)
        self.assertEqual(ev.start, D(2024, 3, 15, 7, 45))
        self.assertEqual(ev.end, D(2024, 3, 15, 8, 45))

    def test_create_rejects_malformed_timestamp(self) -> None:
        res = create_event("not-a-date")
        self.assertFalse(res.ok)
        self.assertEqual(res.error, ERR_INVALID_INPUT)
        self.assertIsNone(res.event)
        self.assertIn("not-a-date", res.reason)


class TestMoveContract(unittest.TestCase):
    def test_move_preserves_duration_exactly(self) -> None:
        ev = _ev(D(2024, 3, 15, 9, 0, 0, 1), D(2024, 3, 15, 10, 17, 3, 999))
        for target in (D(2024, 3, 15, 13, 2), D(2024, 3, 10, 0, 0), D(2024, 4, 1, 23, 59)):
            with self.subTest(target=target):
                res = move_event(ev, target)
                self.assertTrue(res.ok)
                self.assertEqual(res.event.end - res.event.start, ev.end - ev.start)

    def test_move_snaps_target_start(self) -> None:
        ev = _ev(D(2024, 3, 15, 9), D(2024, 3, 15, 10))
        res = move_event(ev, D(2024, 3, 16, 14, 8))
        self.assertEqual(res.event.start, D(2024, 3, 16, 14, 15))
        self.assertEqual(res.event.end, D(2024, 3, 16, 15, 15))
        # Input untouched.
        self.assertEqual(ev.start, D(2024, 3, 15, 9))
        self.assertEqual(res.event.id, "e1")

    def test_nudge(self) -> None:
        ev = _ev(D(2024, 3, 15, 9), D(2024, 3, 15, 10))
        res = nudge_event(ev, dt.timedelta(minutes=30))
        self.assertEqual((res.event.start, res.event.end), (D(2024, 3, 15, 9, 30), D(2024, 3, 15, 10, 30)))
        bad = nudge_event(ev, 30)
        self.assertFalse(bad.ok)
        self.assertEqual(bad.error, ERR_INVALID_INPUT)

    def test_move_to_day_keeps_time_of_day(self) -> None:
        ev = _ev(D(2024, 3, 15, 9, 10), D(2024, 3, 17, 11, 20))
        res = move_event_to_day(ev, dt.date(2024, 3, 20))
        self.assertEqual(res.event.start, D(2024, 3, 20, 9, 10))
        self.assertEqual(res.event.end, D(2024, 3, 22, 11, 20))

    def test_move_to_day_rejects_garbage(self) -> None:
        res = move_event_to_day(_ev(D(2024, 3, 15, 9), D(2024, 3, 15, 10)), "31/02/2024")
        self.assertFalse(res.ok)
        self.assertEqual(res.error, ERR_INVALID_INPUT)


class TestResizeContract(unittest.TestCase):
    def test_resize_end_before_start_rejected(self) -> None:
        ev = _ev(D(2024, 3, 15, 9), D(2024, 3, 15, 10))
        res = resize_event(ev, "end", D(2024, 3, 15, 8, 30))
        self.assertFalse(res.ok)
        self.assertEqual(res.error, ERR_INVALID_RANGE)
        self.assertIsNone(res.event)
        self.assertEqual((ev.start, ev.end), (D(2024, 3, 15, 9), D(2024, 3, 15, 10)))

    def test_resize_to_zero_length_rejected(self) -> None:
        ev = _ev(D(2024, 3, 15, 9), D(2024, 3, 15, 10))
        res = resize_event(ev, "end", D(2024, 3, 15, 9, 5))
        self.assertFalse(res.ok)
        self.assertEqual(res.error, ERR_INVALID_RANGE)

    def test_resize_end(self) -> None:
        ev = _ev(D(2024, 3, 15, 9), D(2024, 3, 15, 10))
        res = resize_event(ev, "end", D(2024, 3, 15, 11, 40))
        self.assertTrue(res.ok)
        self.assertEqual(res.event.start, D(2024, 3, 15, 9))
        self.assertEqual(res.event.end, D(2024, 3, 15, 11, 45))

    def test_resize_start(self) -> None:
        ev = _ev(D(2024, 3, 15, 9), D(2024, 3, 15, 10))
        res = resize_event(ev, "start", "2024-03-15T08:14")
        self.assertTrue(res.ok)
        self.assertEqual(res.event.start, D(2024, 3, 15, 8, 15))
        self.assertEqual(res.event.end, D(2024, 3, 15, 10))
        past_end = resize_event(ev, "start", D(2024, 3, 15, 10, 30))
        self.assertFalse(past_end.ok)
        self.assertEqual(past_end.error, ERR_INVALID_RANGE)

    def test_resize_bad_edge(self) -> None:
        ev = _ev(D(2024, 3, 15, 9), D(2024, 3, 15, 10))
        res = resize_event(ev, "middle", D(2024, 3, 15, 11))
        self.assertFalse(res.ok)
        self.assertEqual(res.error, ERR_INVALID_INPUT)


class TestAllDayGestureContract(unittest.TestCase):
    def setUp(self) -> None:
        self.ev = _ev(D(2024, 3, 15), D(2024, 3, 16, 23, 59, 59, 999000), all_day=True)

    def test_move_shifts_whole_days(self) -> None:
        res = move_event(self.ev, D(2024, 3, 18, 7, 38))
        self.assertTrue(res.ok)
        self.assertTrue(res.event.all_day)
        self.assertEqual(res.event.start, D(2024, 3, 18))
        self.assertEqual(res.event.end, D(2024, 3, 19, 23, 59, 59, 999000))
        self.assertEqual(res.event.duration, self.ev.duration)

    def test_resize_lands_on_day_bounds(self) -> None:
        res = resize_event(self.ev, "end", D(2024, 3, 17, 10))
        self.assertTrue(res.ok)
        self.assertEqual(res.event.end, D(2024, 3, 17, 23, 59, 59, 999000))
        self.assertEqual(res.event.start, D(2024, 3, 15))

        res = resize_event(self.ev, "start", "2024-03-16T15:20")
        self.assertTrue(res.ok)
        self.assertEqual(res.event.start, D(2024, 3, 16))

        shrunk = resize_event(self.ev, "end", D(2024, 3, 15, 10))
        self.assertTrue(shrunk.ok)
        self.assertEqual(shrunk.event.end, D(2024, 3, 15, 23, 59, 59, 999000))

    def test_resize_start_past_end_day_rejected(self) -> None:
        res = resize_event(self.ev, "start", D(2024, 3, 17, 1))
        self.assertFalse(res.ok)
        self.assertEqual(res.error, ERR_INVALID_RANGE)


class TestDateRangeLimitsContract(unittest.TestCase):
    def test_gestures_at_range_limits_return_failures(self) -> None:
        late = _ev(D(9999, 12, 31, 22), D(9999, 12, 31, 23, 30))
        results = [
            create_event("9999-12-31T23:30"),
            create_event(D(9999, 12, 31, 23, 53)),
            move_event(late, "9999-12-31T23:59"),
            resize_event(late, "end", D(9999, 12, 31, 23, 58)),
            nudge_event(late, dt.timedelta(hours=2)),
            move_event_to_day(_ev(D(2024, 3, 15, 23), D(2024, 3, 16, 1)), "9999-12-31"),
            nudge_event(_ev(D(1, 1, 1, 1), D(1, 1, 1, 2)), dt.timedelta(hours=-2)),
        ]
        for res in results:
            self.assertFalse(res.ok)
            self.assertEqual(res.error, ERR_INVALID_INPUT)
            self.assertIn("out", res.reason)
            self.assertIsNone(res.event)

    def test_near_limit_gestures_still_succeed(self) -> None:
        res = create_event("9999-12-31T22:50")
        self.assertTrue(res.ok)
        self.assertEqual(res.event.end, D(9999, 12, 31, 23, 45))


if __name__ == "__main__":
    unittest.main(verbosity=2)
