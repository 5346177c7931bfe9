from __future__ import annotations
from datetime import date, timedelta
from typing import Iterable


def day_of_week(d: date) -> int:
    """Calendar weekday with 0=Sunday .. 6=Saturday (the UIs' convention)."""
    return (d.weekday() + 1) % 7


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def daterange(start: date, end: date) -> Iterable[date]:
    cur = start
    one = timedelta(days=1)
    while cur <= end:
        yield cur
        cur += one


def month_bounds(month: str) -> tuple[date, date]:
    """'2025-02' -> (2025-02-01, 2025-02-28). Raises ValueError when malformed."""
    year_s, month_s = month.split("-")
    first = date(int(year_s), int(month_s), 1)
    if first.month == 12:
        nxt = date(first.year + 1, 1, 1)
    else:
        nxt = date(first.year, first.month + 1, 1)
    return first, nxt - timedelta(days=1)
