"""Pytest configuration and fixtures."""

import logging
from datetime import date, datetime
from decimal import Decimal

import pytest

from loan_calendar.data_models import Holiday, Loan, Payment


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Drop handlers installed by ``setup_logging`` during a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def disbursed_monday() -> datetime:
    """2024-01-01 is a Monday."""
    return datetime(2024, 1, 1, 10, 30)


@pytest.fixture
def end_of_january() -> date:
    return date(2024, 1, 31)


@pytest.fixture
def standard_loan(disbursed_monday: datetime) -> Loan:
    """A 22-installment loan of 1000 per day with 15000 paid."""
    return Loan(
        disbursed_at=disbursed_monday,
        daily_amount=Decimal("1000"),
        amount_to_be_paid=Decimal("22000"),
        amount_paid_so_far=Decimal("15000"),
        amount_disbursed=Decimal("20000"),
        payments=[Payment(amount=Decimal("15000"), date=datetime(2024, 1, 20))],
        loan_id="loan-test-001",
    )


@pytest.fixture
def loan_record() -> dict:
    """The worked-example loan in the nested shape served by the loan service."""
    return {
        "_id": "loan-test-001",
        "disbursedAt": "2024-01-01",
        "loanDetails": {
            "dailyAmount": 1000,
            "amountToBePaid": 22000,
            "amountPaidSoFar": 15000,
            "amountDisbursed": 20000,
        },
        "dailyPayment": [{"amount": 15000, "date": "2024-01-20T09:00:00Z"}],
    }


@pytest.fixture
def christmas_recurring() -> Holiday:
    return Holiday(date=date(2024, 12, 25), is_recurring=True, name="Christmas Day")
