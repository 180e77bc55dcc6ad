"""Holiday catalog matching.

A holiday either recurs every year on the same month and day or applies to
one exact date. Matching is done on UTC calendar fields (see
``loan_calendar.utils.to_date``) so that a holiday stored as a UTC midnight
timestamp is not shifted onto the neighbouring day.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from .data_models import Holiday
from .utils import to_date


def _matches(day: date, holiday: Holiday) -> bool:
    holiday_day = to_date(holiday.date)
    if holiday_day is None:
        return False
    if holiday.is_recurring:
        return (holiday_day.month, holiday_day.day) == (day.month, day.day)
    return holiday_day == day


def find_holiday(day, holidays: Optional[Iterable[Holiday]]) -> Optional[Holiday]:
    """Return the first holiday in ``holidays`` that falls on ``day``.

    ``day`` may be a ``date``, ``datetime`` or ISO string. Returns ``None``
    when ``day`` is missing, the catalog is empty or nothing matches.
    """
    if not holidays:
        return None
    normalized = to_date(day)
    if normalized is None:
        return None
    for holiday in holidays:
        if _matches(normalized, holiday):
            return holiday
    return None


def is_holiday(day, holidays: Optional[Iterable[Holiday]]) -> bool:
    """Return True if ``day`` is a holiday according to ``holidays``."""
    return find_holiday(day, holidays) is not None
