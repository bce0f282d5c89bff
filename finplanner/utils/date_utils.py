"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import Iterator, List, Tuple


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a month"""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def add_months(from_date: date, months: int) -> date:
    """
    Advance a date by whole calendar months.

    Day-of-month overflow rolls into the following month instead of being
    clamped: Jan 31 + 1 month is Mar 3 (Mar 2 in leap years).
    """
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1) + timedelta(days=from_date.day - 1)


def week_start(day: date) -> date:
    """Sunday that opens the week containing day"""
    # date.weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def iter_months(start: date, end: date) -> Iterator[Tuple[int, int]]:
    """Yield (year, month) for every month touched by [start, end]"""
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield year, month
        month += 1
        if month > 12:
            year, month = year + 1, 1
