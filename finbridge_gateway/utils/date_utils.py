"""Calendar-month helpers"""

import calendar
from datetime import date
from typing import List


def shift_month(day: date, months: int) -> date:
    """First day of the month `months` away from day (negative goes back)"""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def trailing_months(today: date, count: int) -> List[date]:
    """First days of the last `count` months, oldest first, ending with today's month"""
    return [shift_month(today, -offset) for offset in range(count - 1, -1, -1)]


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def days_in_month(day: date) -> int:
    return calendar.monthrange(day.year, day.month)[1]
