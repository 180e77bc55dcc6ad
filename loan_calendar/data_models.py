"""Data models for the loan repayment calendar.

This module defines dataclasses for the entities the engine consumes (loans,
recorded payments and holidays) and the values it produces (schedule entries
and metrics snapshots). All of them are plain values: the engine builds new
instances on every call and never mutates its inputs.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


@dataclass
class Payment:
    """A payment recorded against a loan.

    Attributes
    ----------
    amount: Decimal
        The amount received.
    date: Optional[datetime]
        When the payment was recorded. Kept for display only; the schedule
        generator allocates payments in the order they appear on the loan.
    """

    amount: Decimal
    date: Optional[datetime] = None


@dataclass
class Loan:
    """A loan snapshot as supplied by the loan data provider.

    Missing numeric fields are expected to have been coerced to zero and
    missing dates to ``None`` before the loan reaches the engine (see
    ``loan_calendar.loaders``).
    """

    disbursed_at: Optional[datetime]
    daily_amount: Decimal
    amount_to_be_paid: Decimal
    amount_paid_so_far: Decimal = Decimal("0")
    amount_disbursed: Decimal = Decimal("0")
    payments: List[Payment] = field(default_factory=list)
    loan_id: str = ""


@dataclass
class Holiday:
    """A holiday marker.

    When ``is_recurring`` is True the holiday matches the same month and day
    in every year; otherwise it matches only its exact date.
    """

    date: date
    is_recurring: bool = False
    name: str = ""


@dataclass
class ScheduleEntry:
    """One day of the repayment schedule.

    Holiday entries carry zero ``amount_due`` and ``amount_paid`` and a
    ``holiday_reason``; every other entry leaves ``holiday_reason`` unset.
    """

    date: date
    status: str  # "holiday", "paid", "partial" or "pending"
    amount_paid: Decimal
    amount_due: Decimal = Decimal("0")
    holiday_reason: Optional[str] = None


@dataclass
class MetricsSnapshot:
    """Point-in-time collection metrics for a single loan."""

    disbursed_at: Optional[date]
    projected_end_date: Optional[date]
    amount_disbursed: Decimal
    amount_to_be_paid: Decimal
    amount_paid_so_far: Decimal
    daily_amount: Decimal
    business_days_since_disbursement: int
    expected_repayments_by_now: Decimal
    outstanding_due: Decimal
    balance_remaining: Decimal

    @classmethod
    def zero(cls) -> "MetricsSnapshot":
        """Return the snapshot reported for a loan that was never disbursed."""
        return cls(
            disbursed_at=None,
            projected_end_date=None,
            amount_disbursed=Decimal("0"),
            amount_to_be_paid=Decimal("0"),
            amount_paid_so_far=Decimal("0"),
            daily_amount=Decimal("0"),
            business_days_since_disbursement=0,
            expected_repayments_by_now=Decimal("0"),
            outstanding_due=Decimal("0"),
            balance_remaining=Decimal("0"),
        )
