"""Calendar arithmetic helpers used by the billing cycle engine"""

import calendar
from datetime import date, datetime, timedelta


def to_date(value: date | datetime) -> date:
    """Drop the time of day, comparisons happen at day granularity"""
    if isinstance(value, datetime):
        return value.date()
    return value


def last_day_of_month(year: int, month: int) -> int:
    """Number of days in the month (Gregorian leap-year rule)"""
    return calendar.monthrange(year, month)[1]


def clamp_day_to_month(day: int, year: int, month: int) -> int:
    """Clamp a day-of-month to the actual length of the given month"""
    return min(day, last_day_of_month(year, month))


def shift_months(year: int, month: int, delta: int) -> tuple[int, int]:
    """Shift a (year, month) pair by delta months with year rollover"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def add_days(from_date: date, days: int) -> date:
    return to_date(from_date) + timedelta(days=days)


def same_month(first: date, second: date) -> bool:
    return (first.year, first.month) == (second.year, second.month)


def week_of_month(value: date) -> int:
    """
    Week number within the month, weeks starting on Sunday.

    Week 1 is the (possibly partial) week holding the 1st of the month.
    """
    value = to_date(value)
    # date.weekday() is Monday=0, shift so Sunday=0
    first_offset = (value.replace(day=1).weekday() + 1) % 7
    return (value.day + first_offset - 1) // 7 + 1
