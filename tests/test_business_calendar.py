"""Tests for business-day arithmetic."""

from datetime import date, timedelta

import pytest

from loan_calendar.business_calendar import (
    add_business_days,
    add_days,
    count_business_days,
    is_weekend,
    iter_days_after,
    next_day,
)
from loan_calendar.data_models import Holiday


class TestIsWeekend:
    """Tests for is_weekend."""

    @pytest.mark.parametrize(
        "day, expected",
        [
            (date(2024, 1, 1), False),  # Monday
            (date(2024, 1, 5), False),  # Friday
            (date(2024, 1, 6), True),  # Saturday
            (date(2024, 1, 7), True),  # Sunday
        ],
    )
    def test_weekdays_and_weekends(self, day: date, expected: bool) -> None:
        assert is_weekend(day) is expected

    def test_matches_weekday_number_over_a_year(self) -> None:
        day = date(2024, 1, 1)
        for _ in range(366):
            assert is_weekend(day) == (day.weekday() in (5, 6))
            day += timedelta(days=1)


class TestAddDays:
    """Tests for add_days."""

    def test_crosses_month_boundary(self) -> None:
        assert add_days(date(2024, 1, 31), 1) == date(2024, 2, 1)

    def test_leap_day(self) -> None:
        assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)

    def test_negative_offset(self) -> None:
        assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)

    def test_does_not_modify_input(self) -> None:
        start = date(2024, 1, 1)
        add_days(start, 10)
        assert start == date(2024, 1, 1)

    def test_out_of_range(self) -> None:
        assert add_days(date.max, 1) is None
        assert add_days(date.min, -1) is None
        assert next_day(date.max) is None


class TestIterDaysAfter:
    """Tests for iter_days_after."""

    def test_starts_the_day_after(self) -> None:
        days = iter_days_after(date(2024, 1, 31))

        assert [next(days) for _ in range(3)] == [date(2024, 2, 1), date(2024, 2, 2), date(2024, 2, 3)]

    def test_ends_at_last_representable_day(self) -> None:
        assert list(iter_days_after(date(9999, 12, 29))) == [date(9999, 12, 30), date.max]
        assert list(iter_days_after(date.max)) == []


class TestAddBusinessDays:
    """Tests for add_business_days."""

    def test_twenty_two_installments_from_january_first(self) -> None:
        assert add_business_days(date(2024, 1, 1), 22) == date(2024, 1, 31)

    def test_skips_weekend(self) -> None:
        assert add_business_days(date(2024, 1, 5), 1) == date(2024, 1, 8)

    def test_start_on_saturday(self) -> None:
        assert add_business_days(date(2024, 1, 6), 1) == date(2024, 1, 8)

    def test_zero_returns_start(self) -> None:
        assert add_business_days(date(2024, 1, 6), 0) == date(2024, 1, 6)

    def test_result_is_never_a_weekend(self) -> None:
        for n in range(1, 30):
            assert not is_weekend(add_business_days(date(2024, 1, 3), n))

    def test_beyond_calendar_range(self) -> None:
        assert add_business_days(date(9999, 12, 20), 22) is None
        assert add_business_days(date.max, 1) is None

    def test_lands_on_last_representable_day(self) -> None:
        # 9999-12-31 is a Friday
        assert add_business_days(date(9999, 12, 27), 4) == date.max


class TestCountBusinessDays:
    """Tests for count_business_days."""

    def test_january_after_disbursement(self) -> None:
        assert count_business_days(date(2024, 1, 2), date(2024, 1, 31)) == 22

    def test_both_bounds_inclusive(self) -> None:
        assert count_business_days(date(2024, 1, 1), date(2024, 1, 1)) == 1
        assert count_business_days(date(2024, 1, 1), date(2024, 1, 2)) == 2

    def test_weekend_only_range(self) -> None:
        assert count_business_days(date(2024, 1, 6), date(2024, 1, 7)) == 0

    def test_start_after_end(self) -> None:
        assert count_business_days(date(2024, 2, 1), date(2024, 1, 1)) == 0

    def test_missing_bound(self) -> None:
        assert count_business_days(None, date(2024, 1, 1)) == 0
        assert count_business_days(date(2024, 1, 1), None) == 0

    def test_excludes_holidays(self) -> None:
        holidays = [Holiday(date=date(2024, 1, 15))]
        assert count_business_days(date(2024, 1, 2), date(2024, 1, 31), holidays) == 21

    def test_weekend_holiday_not_double_counted(self) -> None:
        holidays = [Holiday(date=date(2024, 1, 6))]
        assert count_business_days(date(2024, 1, 2), date(2024, 1, 31), holidays) == 22

    def test_recurring_holiday_from_earlier_year(self) -> None:
        holidays = [Holiday(date=date(2019, 1, 15), is_recurring=True)]
        assert count_business_days(date(2024, 1, 2), date(2024, 1, 31), holidays) == 21

    def test_counts_through_last_representable_day(self) -> None:
        # Monday 9999-12-27 to Friday 9999-12-31
        assert count_business_days(date(9999, 12, 27), date.max) == 5
