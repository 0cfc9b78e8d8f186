"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta


def add_days(from_date: date, days: int) -> date:
    """Add a fixed number of calendar days"""
    return from_date + timedelta(days=days)


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of shorter months (Jan 31 + 1 → Feb 28/29)"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
