"""Utility functions for the loan repayment calendar.

This module provides helpers for coercing loosely typed loan and holiday
records into Python data types. Unlike a form parser, these helpers never
raise: a missing or malformed number becomes ``Decimal("0")`` and a missing or
malformed date becomes ``None``, so a bad record degrades to an empty schedule
instead of failing a whole report.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation, getcontext
from typing import Any, Optional

getcontext().prec = 28  # increase decimal precision to avoid rounding errors


def parse_datetime(value: Any) -> Optional[datetime]:
    """Convert ``value`` into a ``datetime`` or return ``None``.

    Accepts ``datetime`` and ``date`` instances and ISO 8601 strings such as
    ``"2024-01-01"``, ``"2024-01-01T09:30:00"`` or ``"2024-01-01T09:30:00Z"``.
    A plain date is taken as midnight of that day.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    # fromisoformat only learned the "Z" suffix in Python 3.11
    if cleaned.endswith(("Z", "z")):
        cleaned = cleaned[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(cleaned)
    except ValueError:
        return None


def to_date(value: Any) -> Optional[date]:
    """Return the calendar day represented by ``value``.

    Timezone-aware datetimes are converted to UTC before the date is taken, so
    ``2024-12-25T00:30:00+01:00`` is the 24th. Naive datetimes are assumed to
    already carry the intended calendar day. An aware datetime whose UTC day
    falls outside the representable range yields ``None``.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            try:
                value = value.astimezone(timezone.utc)
            except OverflowError:
                return None
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_datetime(value)
    return to_date(parsed) if parsed is not None else None


def decimal_from_value(value: Any) -> Decimal:
    """Convert a number or numeric string into a ``Decimal``.

    Commas are stripped from strings. Anything that is missing, non-numeric
    or not finite yields ``Decimal("0")``.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        # go through str() so 0.1 stays 0.1 rather than its binary expansion
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            return Decimal("0")
    elif isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not cleaned:
            return Decimal("0")
        try:
            result = Decimal(cleaned)
        except InvalidOperation:
            return Decimal("0")
    else:
        return Decimal("0")
    if not result.is_finite():
        return Decimal("0")
    return result


def parse_iso_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string supplied by a user.

    Unlike ``to_date`` this is strict and raises ``ValueError`` for bad
    input; it is meant for command-line and request arguments such as an
    explicit "today".
    """
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid date (expected YYYY-MM-DD): {value}") from exc
