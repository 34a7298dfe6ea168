from __future__ import annotations

import datetime as dt
import re
from typing import Any, Tuple

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_hhmm(s: str) -> Tuple[int, int]:
    m = _HHMM_RE.match(s.strip())
    if not m:
        raise ValueError(f"Invalid HH:MM: {s!r}")
    hh = int(m.group(1))
    mm = int(m.group(2))
    if not (0 <= hh <= 23 and 0 <= mm <= 59):
        raise ValueError(f"Invalid HH:MM: {s!r}")
    return hh, mm


def parse_date_yyyy_mm_dd(s: str) -> dt.date:
    return dt.datetime.strptime(s.strip(), "%Y-%m-%d").date()


def parse_timestamp(value: Any) -> dt.datetime:
    """Coerce a wall-clock timestamp.

    Accepts:
      - datetime (returned as-is, tzinfo dropped)
      - date (midnight of that day)
      - ISO-8601 string, e.g. "2024-03-15T09:30" or "2024-03-15 09:30:00"
        (a trailing "Z" or offset is accepted and dropped: calgrid works in
        local wall-clock time only)

    Raises ValueError for anything else.
    """
    if isinstance(value, dt.datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp: expected datetime or ISO string, got {type(value).__name__}")

    s = value.strip()
    if not s:
        raise ValueError("Invalid timestamp: empty string")
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        ts = dt.datetime.fromisoformat(s)
    except ValueError as ex:
        raise ValueError(f"Invalid timestamp: {value!r}") from ex
    return ts.replace(tzinfo=None)


def format_date_input(d: dt.date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def format_hhmm(hh: int, mm: int) -> str:
    return f"{int(hh):02d}:{int(mm):02d}"
