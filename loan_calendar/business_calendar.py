"""Business-day arithmetic.

All helpers work on ``datetime.date`` values and return new values; nothing
is modified in place. A business day is a weekday that is not a holiday, but
note that ``add_business_days`` only skips weekends.

Stepping past ``date.max`` (or before ``date.min``) yields ``None`` rather
than raising, so a record with an extreme date degrades to an empty result.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Iterator, Optional

from .data_models import Holiday
from .holidays import is_holiday


def is_weekend(day: date) -> bool:
    """Return True for Saturday and Sunday."""
    return day.weekday() >= 5


def add_days(day: date, days: int) -> Optional[date]:
    """Return ``day`` shifted by ``days`` calendar days, or ``None`` if out of range."""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return None


def next_day(day: date) -> Optional[date]:
    return add_days(day, 1)


def add_business_days(start: date, business_days: int) -> Optional[date]:
    """Return the date on which the ``business_days``-th weekday after ``start`` falls.

    Only weekends are skipped; holidays are counted like any other weekday.
    ``start`` itself is never counted. A non-positive count returns ``start``.
    Returns ``None`` when the result would lie beyond ``date.max``.
    """
    current: Optional[date] = start
    added = 0
    while added < business_days:
        current = next_day(current)
        if current is None:
            return None
        if not is_weekend(current):
            added += 1
    return current


def count_business_days(
    start: Optional[date],
    end: Optional[date],
    holidays: Optional[Iterable[Holiday]] = None,
) -> int:
    """Count business days from ``start`` to ``end``, both inclusive.

    Weekends and holidays are excluded. Returns 0 when either bound is
    missing or ``start`` is after ``end``.
    """
    if start is None or end is None or start > end:
        return 0
    holiday_list = list(holidays or [])
    days = 0
    cursor: Optional[date] = start
    while cursor is not None and cursor <= end:
        if not is_weekend(cursor) and not is_holiday(cursor, holiday_list):
            days += 1
        cursor = next_day(cursor)
    return days


def iter_days_after(start: date) -> Iterator[date]:
    """Yield consecutive calendar days after ``start``, ending at ``date.max``."""
    current = next_day(start)
    while current is not None:
        yield current
        current = next_day(current)
