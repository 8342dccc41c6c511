"""Date manipulation utilities"""

from calendar import monthrange
from datetime import date, datetime


def add_months(from_date: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping the day to the target month's length"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, monthrange(year, month)[1])
    return date(year, month, day)


def days_between(start: datetime, end: datetime) -> int:
    """Whole days from start to end (negative when end precedes start)"""
    seconds = (end - start).total_seconds()
    return int(seconds // 86400) if seconds >= 0 else -int(-seconds // 86400)
