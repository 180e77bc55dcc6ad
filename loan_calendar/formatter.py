"""Output helpers for the loan repayment calendar.

This module provides simple functions to render schedules and metrics in a
tabular text format for the command line. Amounts stay ``Decimal`` in the
engine; only these helpers turn them into display strings.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, Optional, Sequence, Tuple

from .data_models import MetricsSnapshot, ScheduleEntry

CURRENCY_SYMBOLS = {
    "NGN": "₦",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}
MISSING = "—"


def format_currency(value, currency: str = "NGN") -> str:
    """Format an amount with a currency symbol and thousands separators.

    Non-numeric values (including ``None``) are shown as an em dash.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return MISSING
    amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    if not amount.is_finite():
        return MISSING
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper() + " ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_date(value: Optional[date]) -> str:
    if value is None:
        return MISSING
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    return value.strftime("%Y-%m-%d")


def print_metrics(metrics: MetricsSnapshot, currency: str = "NGN") -> None:
    """Print a loan metrics snapshot in a human-readable format."""
    print("Loan metrics")
    print("-" * 72)
    print(f"Disbursed on        : {format_date(metrics.disbursed_at)}")
    print(f"Projected end date  : {format_date(metrics.projected_end_date)}")
    print(f"Amount disbursed    : {format_currency(metrics.amount_disbursed, currency)}")
    print(f"Amount to be paid   : {format_currency(metrics.amount_to_be_paid, currency)}")
    print(f"Daily installment   : {format_currency(metrics.daily_amount, currency)}")
    print(f"Paid so far         : {format_currency(metrics.amount_paid_so_far, currency)}")
    print(f"Business days       : {metrics.business_days_since_disbursement}")
    print(f"Expected by now     : {format_currency(metrics.expected_repayments_by_now, currency)}")
    print(f"Outstanding due     : {format_currency(metrics.outstanding_due, currency)}")
    print(f"Balance remaining   : {format_currency(metrics.balance_remaining, currency)}")
    print("-" * 72)


def print_schedule_summary(summary: Dict[str, object], currency: str = "NGN") -> None:
    counts = summary["status_counts"]
    print("Schedule summary")
    print("-" * 72)
    print(f"Paid days           : {counts.get('paid', 0)}")
    print(f"Partial days        : {counts.get('partial', 0)}")
    print(f"Pending days        : {counts.get('pending', 0)}")
    print(f"Holidays            : {counts.get('holiday', 0)}")
    print(f"Total scheduled     : {format_currency(summary['total_scheduled'], currency)}")
    print(f"Total allocated     : {format_currency(summary['total_allocated'], currency)}")
    print(f"Final due date      : {format_date(summary['final_due_date'])}")
    print("-" * 72)


def print_schedule(schedule: Iterable[ScheduleEntry]) -> None:
    """Print the repayment schedule as a simple table."""
    headers = ["Day", "Date", "Weekday", "Due", "Paid", "Status", "Note"]
    print("\t".join(headers))
    for number, entry in enumerate(schedule, start=1):
        row = [
            str(number),
            entry.date.strftime("%Y-%m-%d"),
            entry.date.strftime("%a"),
            f"{entry.amount_due:.2f}",
            f"{entry.amount_paid:.2f}",
            entry.status,
            entry.holiday_reason or "",
        ]
        print("\t".join(row))


def print_portfolio(
    results: Sequence[Tuple[str, MetricsSnapshot]],
    summary: Dict[str, object],
    currency: str = "NGN",
) -> None:
    """Print one row per loan followed by portfolio totals."""
    print(f"{'Loan':20s} {'Days':>5s} {'Expected':>15s} {'Paid':>15s} {'Due':>15s} {'Balance':>15s}")
    for loan_id, metrics in results:
        print(
            f"{(loan_id or MISSING)[:20]:20s} "
            f"{metrics.business_days_since_disbursement:5d} "
            f"{metrics.expected_repayments_by_now:15.2f} "
            f"{metrics.amount_paid_so_far:15.2f} "
            f"{metrics.outstanding_due:15.2f} "
            f"{metrics.balance_remaining:15.2f}"
        )
    print("=" * 90)
    print(f"Loans               : {summary['loan_count']}")
    print(f"With amount due     : {summary['loans_with_outstanding_due']}")
    print(f"Total outstanding   : {format_currency(summary['total_outstanding_due'], currency)}")
    print(f"Total balance       : {format_currency(summary['total_balance_remaining'], currency)}")
