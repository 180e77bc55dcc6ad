"""Core calculation engine for the loan repayment calendar.

This module implements the two calculations the reporting layer relies on:

* ``generate_repayment_schedule`` walks the calendar from the day after
  disbursement and lays out one entry per due business day until the loan's
  total is scheduled, allocating recorded payments to those days in order.
  Holidays appear as zero-amount entries; weekends are skipped.
* ``compute_loan_metrics`` takes a snapshot of what should have been collected
  by today against what was actually paid.

Both are pure functions of their inputs. Missing data never raises; it
produces an empty schedule or a zeroed snapshot.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .business_calendar import add_business_days, count_business_days, is_weekend, iter_days_after, next_day
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .data_models import Holiday, Loan, MetricsSnapshot, ScheduleEntry
from .holidays import find_holiday
from .utils import to_date

logger = logging.getLogger(__name__)

STATUS_HOLIDAY = "holiday"
STATUS_PAID = "paid"
STATUS_PARTIAL = "partial"
STATUS_PENDING = "pending"

ZERO = Decimal("0")
CENT = Decimal("0.01")


def _round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _classify(amount_paid: Decimal, amount_due: Decimal, epsilon: Decimal) -> str:
    if amount_paid >= amount_due - epsilon:
        return STATUS_PAID
    if amount_paid > 0:
        return STATUS_PARTIAL
    return STATUS_PENDING


def generate_repayment_schedule(
    loan: Optional[Loan],
    holidays: Optional[Iterable[Holiday]] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> List[ScheduleEntry]:
    """Build the day-by-day repayment schedule for a loan.

    Parameters
    ----------
    loan: Optional[Loan]
        The loan snapshot. Payments are consumed in the order they appear in
        ``loan.payments``; their own dates are not used for allocation.
    holidays: Iterable[Holiday]
        The holiday catalog. Holidays produce informational entries with no
        amount due.
    config: EngineConfig
        Rounding tolerance, iteration bound and default holiday label.

    Returns
    -------
    List[ScheduleEntry]
        Entries in strictly increasing date order. Empty when the loan has no
        disbursement date or a non-positive daily amount. At most
        ``config.max_schedule_iterations`` entries are produced; a schedule
        cut short by that bound, or by reaching ``date.max``, is returned as-is.
    """
    if loan is None:
        return []
    disbursed = to_date(loan.disbursed_at)
    daily_amount = loan.daily_amount
    if disbursed is None or daily_amount <= 0:
        return []

    holiday_list = list(holidays or [])
    amount_to_be_paid = loan.amount_to_be_paid
    epsilon = config.epsilon
    remaining_paid = sum((p.amount for p in loan.payments), ZERO)

    schedule: List[ScheduleEntry] = []
    scheduled_amount = ZERO
    iterations = 0

    for current_date in iter_days_after(disbursed):
        if scheduled_amount >= amount_to_be_paid - epsilon or iterations >= config.max_schedule_iterations:
            break
        if is_weekend(current_date):
            continue

        holiday = find_holiday(current_date, holiday_list)
        if holiday is not None:
            schedule.append(
                ScheduleEntry(
                    date=current_date,
                    status=STATUS_HOLIDAY,
                    amount_paid=ZERO,
                    amount_due=ZERO,
                    holiday_reason=holiday.name or config.default_holiday_reason,
                )
            )
            iterations += 1
            continue

        # Cap the last installment so the schedule never overshoots the total
        amount_due = min(daily_amount, amount_to_be_paid - scheduled_amount)
        amount_paid = max(min(remaining_paid, amount_due), ZERO)
        remaining_paid -= amount_paid
        scheduled_amount += amount_due

        schedule.append(
            ScheduleEntry(
                date=current_date,
                status=_classify(amount_paid, amount_due, epsilon),
                amount_paid=amount_paid,
                amount_due=amount_due,
            )
        )
        iterations += 1

    if scheduled_amount < amount_to_be_paid - epsilon:
        logger.debug(
            "Schedule for loan %r stopped at %d entries with %s of %s scheduled",
            loan.loan_id,
            len(schedule),
            scheduled_amount,
            amount_to_be_paid,
            extra={"loan_id": loan.loan_id},
        )
    return schedule


def compute_loan_metrics(
    loan: Optional[Loan],
    holidays: Optional[Iterable[Holiday]] = None,
    today: Optional[date] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> MetricsSnapshot:
    """Compute expected-versus-actual collection metrics for a loan.

    Until ``config.installment_count`` business days have elapsed, the amount
    due is what the daily installments should have accumulated to, less what
    has been paid. From that day on the whole unpaid balance is due.

    ``today`` defaults to the current date. Day counts exclude weekends and
    holidays and start the day after disbursement. The projected end date, by
    contrast, only skips weekends.
    """
    if loan is None:
        return MetricsSnapshot.zero()
    disbursed = to_date(loan.disbursed_at)
    if disbursed is None:
        return MetricsSnapshot.zero()

    today = to_date(today) if today is not None else date.today()
    installment_count = config.installment_count

    amount_to_be_paid = loan.amount_to_be_paid
    amount_paid_so_far = loan.amount_paid_so_far
    daily_amount = loan.daily_amount

    projected_end_date = add_business_days(disbursed, installment_count)
    business_days = max(
        count_business_days(next_day(disbursed), today, holidays),
        0,
    )
    expected_by_now = daily_amount * business_days
    should_clear_outstanding_balance = business_days >= installment_count

    balance_remaining = max(amount_to_be_paid - amount_paid_so_far, ZERO)
    if should_clear_outstanding_balance:
        outstanding_due = balance_remaining
    else:
        outstanding_due = max(expected_by_now - amount_paid_so_far, ZERO)

    return MetricsSnapshot(
        disbursed_at=disbursed,
        projected_end_date=projected_end_date,
        amount_disbursed=loan.amount_disbursed,
        amount_to_be_paid=amount_to_be_paid,
        amount_paid_so_far=amount_paid_so_far,
        daily_amount=daily_amount,
        business_days_since_disbursement=business_days,
        expected_repayments_by_now=expected_by_now,
        outstanding_due=_round_money(outstanding_due),
        balance_remaining=_round_money(balance_remaining),
    )


def compute_portfolio_metrics(
    loans: Sequence[Loan],
    holidays: Optional[Iterable[Holiday]] = None,
    today: Optional[date] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> List[Tuple[str, MetricsSnapshot]]:
    """Compute metrics for every loan against a single "today".

    The holiday catalog and the date are fixed once so that every loan in the
    report is measured against the same calendar.
    """
    holiday_list = list(holidays or [])
    as_of = to_date(today) if today is not None else date.today()
    results = [
        (loan.loan_id, compute_loan_metrics(loan, holiday_list, as_of, config))
        for loan in loans
    ]
    logger.debug(
        "Computed metrics for %d loans as of %s",
        len(results),
        as_of,
        extra={"loan_count": len(results), "as_of": as_of},
    )
    return results


def summarize_portfolio(snapshots: Iterable[MetricsSnapshot]) -> Dict[str, object]:
    """Aggregate a set of metrics snapshots into report totals."""
    loan_count = 0
    loans_with_arrears = 0
    total_outstanding = ZERO
    total_balance = ZERO
    total_expected = ZERO
    for snapshot in snapshots:
        loan_count += 1
        total_outstanding += snapshot.outstanding_due
        total_balance += snapshot.balance_remaining
        total_expected += snapshot.expected_repayments_by_now
        if snapshot.outstanding_due > 0:
            loans_with_arrears += 1
    return {
        "loan_count": loan_count,
        "loans_with_outstanding_due": loans_with_arrears,
        "total_outstanding_due": _round_money(total_outstanding),
        "total_balance_remaining": _round_money(total_balance),
        "total_expected_repayments_by_now": _round_money(total_expected),
    }


def summarize_schedule(schedule: Iterable[ScheduleEntry]) -> Dict[str, object]:
    """Count schedule entries by status and total the scheduled and paid amounts."""
    counts = {STATUS_PAID: 0, STATUS_PARTIAL: 0, STATUS_PENDING: 0, STATUS_HOLIDAY: 0}
    total_due = ZERO
    total_paid = ZERO
    last_due_date: Optional[date] = None
    for entry in schedule:
        counts[entry.status] = counts.get(entry.status, 0) + 1
        if entry.status != STATUS_HOLIDAY:
            total_due += entry.amount_due
            total_paid += entry.amount_paid
            last_due_date = entry.date
    return {
        "status_counts": counts,
        "total_scheduled": total_due,
        "total_allocated": total_paid,
        "final_due_date": last_due_date,
    }
