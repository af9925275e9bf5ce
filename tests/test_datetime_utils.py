from datetime import date

import pytest

from src.class_attendance.class_attendance.common.datetime_utils import month_bounds, parse_iso_date
from src.class_attendance.class_attendance.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "month,year,expected_last",
    [
        (1, 2025, date(2025, 1, 31)),
        (4, 2025, date(2025, 4, 30)),
        (2, 2023, date(2023, 2, 28)),
        (2, 2024, date(2024, 2, 29)),
        (2, 1900, date(1900, 2, 28)),
        (2, 2000, date(2000, 2, 29)),
    ],
)
def test_month_bounds_respect_month_length(month, year, expected_last):
    start, end = month_bounds(month, year)

    assert start == date(year, month, 1)
    assert end == expected_last


@pytest.mark.parametrize("month,year", [(0, 2025), (13, 2025), (5, 99), (5, 20250)])
def test_month_bounds_rejects_out_of_range(month, year):
    with pytest.raises(ValidationError):
        month_bounds(month, year)


def test_parse_iso_date():
    assert parse_iso_date("2025-03-10") == date(2025, 3, 10)
    with pytest.raises(ValidationError):
        parse_iso_date("10/03/2025")
