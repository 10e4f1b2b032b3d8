"""Unit tests for recurcal.calendar.calendar_math."""

from datetime import date, datetime

import pytest

from recurcal.calendar.calendar_math import (
    add_days,
    add_months,
    add_years,
    coerce_date,
    days_in_month,
    format_date,
    is_leap_year,
    parse_date,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "year,expected",
    [(2024, True), (2025, False), (1900, False), (2000, True), (2100, False), (2400, True)],
)
def test_is_leap_year(year: int, expected: bool) -> None:
    assert is_leap_year(year) is expected


class TestDaysInMonth:
    def test_standard_lengths(self):
        lengths = [days_in_month(2025, m) for m in range(1, 13)]
        assert lengths == [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]

    def test_february_in_leap_year(self):
        assert days_in_month(2024, 2) == 29
        assert days_in_month(1900, 2) == 28

    @pytest.mark.parametrize("month", [0, 13])
    def test_rejects_out_of_range_month(self, month):
        with pytest.raises(ValueError):
            days_in_month(2025, month)


class TestParseDate:
    def test_valid_date(self):
        assert parse_date("2025-10-01") == date(2025, 10, 1)

    def test_leap_day(self):
        assert parse_date("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize(
        "text",
        [
            "2025-02-29",  # common year
            "2025-02-31",
            "2025-04-31",  # 30-day month
            "2025-13-01",
            "2025-00-10",
            "2025-01-00",
            "0000-01-01",
        ],
    )
    def test_rejects_nonexistent_dates(self, text):
        assert parse_date(text) is None

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "2025-1-05",
            "25-01-05",
            "2025/01/05",
            "2025-01-05T10:00",
            " 2025-01-05",
            "2025-01-05\n",
            "２０２５-01-05",
            "20250105",
        ],
    )
    def test_rejects_wrong_shape(self, text):
        assert parse_date(text) is None

    @pytest.mark.parametrize("value", [None, 20250105, date(2025, 1, 5)])
    def test_non_string_input_is_invalid(self, value):
        assert parse_date(value) is None


def test_format_date_is_zero_padded():
    assert format_date(date(2025, 3, 7)) == "2025-03-07"
    assert format_date(date(999, 1, 2)) == "0999-01-02"


def test_coerce_date_accepts_date_or_text():
    assert coerce_date(date(2025, 1, 1)) == date(2025, 1, 1)
    assert coerce_date("2025-01-01") == date(2025, 1, 1)
    assert coerce_date("garbage") is None


def test_coerce_date_drops_time_of_day():
    result = coerce_date(datetime(2025, 1, 1, 10, 30))
    assert result == date(2025, 1, 1)
    assert type(result) is date


class TestAddDays:
    def test_crosses_month_and_year(self):
        assert add_days(date(2025, 12, 29), 7) == date(2026, 1, 5)

    def test_leap_day(self):
        assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)
        assert add_days(date(2025, 2, 28), 1) == date(2025, 3, 1)

    def test_negative_offset(self):
        assert add_days(date(2025, 3, 1), -1) == date(2025, 2, 28)


class TestAddMonths:
    def test_keeps_day_of_month(self):
        assert add_months(date(2025, 1, 15), 1) == date(2025, 2, 15)

    def test_carries_year(self):
        assert add_months(date(2025, 11, 10), 3) == date(2026, 2, 10)
        assert add_months(date(2025, 1, 31), 12) == date(2026, 1, 31)

    def test_missing_day_returns_none_instead_of_clamping(self):
        assert add_months(date(2025, 1, 31), 1) is None
        assert add_months(date(2025, 1, 31), 3) is None  # April has 30 days
        assert add_months(date(2025, 1, 30), 1) is None

    def test_day_29_in_leap_february(self):
        assert add_months(date(2024, 1, 29), 1) == date(2024, 2, 29)
        assert add_months(date(2025, 1, 29), 1) is None

    def test_zero_offset_is_identity(self):
        assert add_months(date(2025, 1, 31), 0) == date(2025, 1, 31)


class TestAddYears:
    def test_regular_date(self):
        assert add_years(date(2025, 3, 31), 2) == date(2027, 3, 31)

    def test_leap_day_to_leap_year(self):
        assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)

    def test_leap_day_to_common_year(self):
        assert add_years(date(2024, 2, 29), 1) is None

    def test_century_rule(self):
        assert add_years(date(2096, 2, 29), 4) is None  # 2100 is not a leap year
        assert add_years(date(1996, 2, 29), 4) == date(2000, 2, 29)
