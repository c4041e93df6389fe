"""Unit tests for calendar arithmetic helpers"""

import pytest
from datetime import date, datetime
from pennywise.utils.date_utils import (
    add_days,
    clamp_day_to_month,
    last_day_of_month,
    same_month,
    shift_months,
    to_date,
    week_of_month,
)


@pytest.mark.parametrize(
    "year, month, expected",
    [
        (2024, 1, 31),
        (2024, 2, 29),  # divisible by 4
        (2023, 2, 28),
        (1900, 2, 28),  # divisible by 100 but not 400
        (2000, 2, 29),  # divisible by 400
        (2024, 4, 30),
        (2024, 12, 31),
    ],
)
def test_last_day_of_month(year, month, expected):
    assert last_day_of_month(year, month) == expected


def test_clamp_day_to_month():
    assert clamp_day_to_month(31, 2024, 2) == 29
    assert clamp_day_to_month(31, 2023, 2) == 28
    assert clamp_day_to_month(31, 2024, 4) == 30
    assert clamp_day_to_month(15, 2024, 2) == 15
    assert clamp_day_to_month(31, 2024, 3) == 31


def test_shift_months_rollover():
    assert shift_months(2024, 12, 1) == (2025, 1)
    assert shift_months(2024, 1, -1) == (2023, 12)
    assert shift_months(2024, 6, 0) == (2024, 6)
    assert shift_months(2024, 3, -15) == (2022, 12)
    assert shift_months(2024, 11, 26) == (2027, 1)


def test_add_days_crosses_month_and_year():
    assert add_days(date(2024, 12, 20), 21) == date(2025, 1, 10)
    assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)


def test_to_date_drops_time_of_day():
    assert to_date(datetime(2024, 9, 20, 23, 59, 59)) == date(2024, 9, 20)
    assert to_date(date(2024, 9, 20)) == date(2024, 9, 20)
    assert type(to_date(datetime(2024, 9, 20, 8, 0))) is date


def test_same_month():
    assert same_month(date(2024, 9, 1), date(2024, 9, 30))
    assert not same_month(date(2024, 9, 30), date(2024, 10, 1))
    assert not same_month(date(2023, 9, 1), date(2024, 9, 1))


def test_week_of_month_sunday_start():
    # Sep 1, 2024 is a Sunday
    assert week_of_month(date(2024, 9, 1)) == 1
    assert week_of_month(date(2024, 9, 7)) == 1
    assert week_of_month(date(2024, 9, 8)) == 2
    # Oct 1, 2024 is a Tuesday, so the first Sunday opens week 2
    assert week_of_month(date(2024, 10, 5)) == 1
    assert week_of_month(date(2024, 10, 6)) == 2
    assert week_of_month(date(2024, 10, 31)) == 5
