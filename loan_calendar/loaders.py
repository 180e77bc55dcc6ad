"""Conversion of raw loan and holiday records into engine models.

Records arrive as JSON-like dictionaries from the loan and holiday data
providers. Two loan shapes are accepted: a flat one

    {"disbursedAt": ..., "dailyAmount": ..., "amountToBePaid": ...,
     "amountPaidSoFar": ..., "payments": [{"amount": ..., "date": ...}]}

and the nested shape used by the loan service, where the amounts live under
``loanDetails`` and payments under ``dailyPayment``. Snake-case keys are
accepted as well. Field values are coerced permissively (see
``loan_calendar.utils``); only a record of the wrong type raises
``LoanDataError``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .data_models import Holiday, Loan, Payment
from .exceptions import LoanDataError
from .utils import decimal_from_value, parse_datetime, to_date


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def payment_from_dict(record: Any) -> Payment:
    """Build a ``Payment`` from a ``{"amount", "date"}`` record."""
    if not isinstance(record, Mapping):
        return Payment(amount=decimal_from_value(record))
    return Payment(
        amount=decimal_from_value(record.get("amount")),
        date=parse_datetime(_first(record, "date", "paidAt", "paid_at")),
    )


def loan_from_dict(record: Any) -> Loan:
    """Build a ``Loan`` from a flat or nested loan record."""
    if not isinstance(record, Mapping):
        raise LoanDataError(f"Loan record must be an object; got {type(record).__name__}")

    details = record.get("loanDetails") or record.get("loan_details") or {}
    if not isinstance(details, Mapping):
        details = {}

    def lookup(*keys: str) -> Any:
        value = _first(record, *keys)
        if value is None:
            value = _first(details, *keys)
        return value

    raw_payments = _first(record, "payments", "dailyPayment", "daily_payment")
    if not isinstance(raw_payments, list):
        raw_payments = []

    loan_id = _first(record, "loanId", "loan_id", "_id", "id")
    return Loan(
        disbursed_at=parse_datetime(lookup("disbursedAt", "disbursed_at")),
        daily_amount=decimal_from_value(lookup("dailyAmount", "daily_amount")),
        amount_to_be_paid=decimal_from_value(lookup("amountToBePaid", "amount_to_be_paid")),
        amount_paid_so_far=decimal_from_value(lookup("amountPaidSoFar", "amount_paid_so_far")),
        amount_disbursed=decimal_from_value(lookup("amountDisbursed", "amount_disbursed")),
        payments=[payment_from_dict(p) for p in raw_payments],
        loan_id=str(loan_id) if loan_id is not None else "",
    )


def holiday_from_dict(record: Any) -> Optional[Holiday]:
    """Build a ``Holiday`` or return ``None`` if the record has no usable date."""
    if not isinstance(record, Mapping):
        return None
    day = to_date(_first(record, "date", "holiday"))
    if day is None:
        return None
    recurring = _first(record, "isRecurring", "is_recurring")
    if isinstance(recurring, str):
        recurring = recurring.strip().lower() in ("true", "1", "yes")
    name = _first(record, "name", "reason", "description")
    return Holiday(
        date=day,
        is_recurring=bool(recurring),
        name=str(name).strip() if name is not None else "",
    )


def holidays_from_list(records: Any) -> List[Holiday]:
    """Build the holiday catalog, skipping entries without a valid date.

    ``None`` means no holidays.
    """
    if records is None:
        return []
    if not isinstance(records, list):
        raise LoanDataError(f"Holidays must be a list; got {type(records).__name__}")
    holidays = []
    for record in records:
        holiday = holiday_from_dict(record)
        if holiday is not None:
            holidays.append(holiday)
    return holidays


def loans_from_list(records: Any) -> List[Loan]:
    """Build a list of loans from a list of loan records."""
    if not isinstance(records, list):
        raise LoanDataError(f"Loans must be a list; got {type(records).__name__}")
    return [loan_from_dict(record) for record in records]


def read_json(path: Path) -> Any:
    """Read a JSON document, wrapping I/O and syntax errors in ``LoanDataError``."""
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as exc:
        raise LoanDataError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise LoanDataError(f"{path} is not valid JSON: {exc}") from exc


def load_loan(path: Path) -> Loan:
    return loan_from_dict(read_json(path))


def load_loans(path: Path) -> List[Loan]:
    """Load loans from a file holding either a list or ``{"loans": [...]}``."""
    data = read_json(path)
    if isinstance(data, dict) and "loans" in data:
        data = data["loans"]
    return loans_from_list(data)


def load_holidays(path: Optional[Path]) -> List[Holiday]:
    """Load a holiday list from a file holding either a list or ``{"holidays": [...]}``."""
    if path is None:
        return []
    data = read_json(path)
    if isinstance(data, dict) and "holidays" in data:
        data = data["holidays"]
    return holidays_from_list(data)


def serialize_value(obj: Any) -> Any:
    """Serialize engine values to JSON-compatible types."""
    from dataclasses import fields, is_dataclass
    from datetime import date, datetime
    from decimal import Decimal

    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if is_dataclass(obj) and not isinstance(obj, type):
        return {_camel(f.name): serialize_value(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, dict):
        return {_camel(str(k)): serialize_value(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [serialize_value(item) for item in obj]
    return obj


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def serialize_schedule(schedule: Iterable[Any]) -> List[Dict[str, Any]]:
    """Convert schedule entries into JSON-serialisable dictionaries.

    ``holidayReason`` is only included on holiday entries.
    """
    serialized = []
    for entry in schedule:
        item = serialize_value(entry)
        if item.get("holidayReason") is None:
            item.pop("holidayReason", None)
        serialized.append(item)
    return serialized
