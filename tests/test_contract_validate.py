from __future__ import annotations

import datetime as dt
import unittest

from calgrid.model import CalendarEvent
from calgrid.validate import EventValidationError, assert_valid_events, validate_events

D = dt.datetime


def _ev(eid: str, start: dt.datetime, end: dt.datetime) -> CalendarEvent:
    return CalendarEvent(id=eid, title="t", start=start, end=end)


class TestValidateEventsContract(unittest.TestCase):
    def test_valid_collection(self) -> None:
        evs = [_ev("a", D(2024, 3, 15, 9), D(2024, 3, 15, 10)), _ev("b", D(2024, 3, 15, 9), D(2024, 3, 15, 9))]
        self.assertEqual(validate_events(evs), [])
        assert_valid_events(evs)

    def test_reversed_range_and_duplicates(self) -> None:
        evs = [_ev("a", D(2024, 3, 15, 10), D(2024, 3, 15, 9)), _ev("a", D(2024, 3, 15, 9), D(2024, 3, 15, 10))]
        errs = validate_events(evs)
        self.assertTrue(any("end must not precede start" in e for e in errs))
        self.assertTrue(any("duplicate id 'a'" in e for e in errs))
        with self.assertRaises(EventValidationError):
            assert_valid_events(evs)

    def test_aware_datetimes_rejected(self) -> None:
        utc = dt.timezone.utc
        errs = validate_events([_ev("a", D(2024, 3, 15, 9, tzinfo=utc), D(2024, 3, 15, 10, tzinfo=utc))])
        self.assertTrue(any("naive" in e for e in errs))

    def test_non_events_rejected(self) -> None:
        self.assertTrue(validate_events("nope"))  # type: ignore[arg-type]
        self.assertTrue(validate_events([{"id": "a"}]))
        # unsaved drafts may share the empty id
        self.assertEqual(validate_events([_ev("", D(2024, 3, 15, 9), D(2024, 3, 15, 10))] * 2), [])


if __name__ == "__main__":
    unittest.main(verbosity=2)
