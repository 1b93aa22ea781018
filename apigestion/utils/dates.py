# apigestion/utils/dates.py
"""Calendar helpers for queen age milestones."""

import calendar
from datetime import datetime

DAYS_PER_MONTH = 30


def add_months(value: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def add_years(value: datetime, years: int) -> datetime:
    return add_months(value, years * 12)


def whole_months(start: datetime, end: datetime) -> int:
    """Elapsed 30-day months from start to end, floored (negative if end < start)."""
    return (end - start).days // DAYS_PER_MONTH
