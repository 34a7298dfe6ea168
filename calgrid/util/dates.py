# calgrid/util/dates.py
from __future__ import annotations

import calendar
import datetime as dt
from typing import Iterator, List, Union

DateLike = Union[dt.date, dt.datetime]

# Weekday numbering used across calgrid: 0=Sunday .. 6=Saturday.
SUNDAY = 0
MONDAY = 1

END_OF_DAY = dt.time(23, 59, 59, 999000)


def calendar_day(d: DateLike) -> dt.date:
    if isinstance(d, dt.datetime):
        return d.date()
    return d


def weekday_sun0(d: DateLike) -> int:
    """Weekday with Sunday as 0 (Python's weekday() has Monday as 0)."""
    return (calendar_day(d).weekday() + 1) % 7


def start_of_day(d: DateLike) -> dt.datetime:
    return dt.datetime.combine(calendar_day(d), dt.time(0, 0))


def end_of_day(d: DateLike) -> dt.datetime:
    return dt.datetime.combine(calendar_day(d), END_OF_DAY)


def add_days(d: DateLike, n: int) -> DateLike:
    return d + dt.timedelta(days=int(n))


def add_weeks(d: DateLike, n: int) -> DateLike:
    return d + dt.timedelta(weeks=int(n))


def add_hours(ts: dt.datetime, n: float) -> dt.datetime:
    return ts + dt.timedelta(hours=n)


def add_months(d: DateLike, n: int) -> DateLike:
    """Shift by n calendar months.

    Day overflow clamps to the last valid day of the target month:
    Jan 31 + 1 month -> Feb 28 (Feb 29 in leap years). Time of day is kept.
    """
    total = d.year * 12 + (d.month - 1) + int(n)
    year, month0 = divmod(total, 12)
    month = month0 + 1
    last = calendar.monthrange(year, month)[1]
    return d.replace(year=year, month=month, day=min(d.day, last))


def start_of_week(d: DateLike, week_starts_on: int = SUNDAY) -> dt.date:
    day = calendar_day(d)
    diff = (weekday_sun0(day) - int(week_starts_on)) % 7
    return day - dt.timedelta(days=diff)


def end_of_week(d: DateLike, week_starts_on: int = SUNDAY) -> dt.date:
    return start_of_week(d, week_starts_on) + dt.timedelta(days=6)


def start_of_month(d: DateLike) -> dt.date:
    return calendar_day(d).replace(day=1)


def end_of_month(d: DateLike) -> dt.date:
    day = calendar_day(d)
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def is_same_day(a: DateLike, b: DateLike) -> bool:
    return calendar_day(a) == calendar_day(b)


def month_key(d: DateLike) -> tuple[int, int]:
    return (d.year, d.month)


def is_same_month(a: DateLike, b: DateLike) -> bool:
    return month_key(a) == month_key(b)


def iter_days(start: DateLike, end: DateLike) -> Iterator[dt.date]:
    """Yield calendar days from start to end inclusive."""
    cur = calendar_day(start)
    last = calendar_day(end)
    while cur <= last:
        yield cur
        cur = cur + dt.timedelta(days=1)


def day_range(start: DateLike, count: int) -> List[dt.date]:
    first = calendar_day(start)
    return [first + dt.timedelta(days=i) for i in range(max(0, int(count)))]
