"""Business-day calendar utilities (Mon-Fri, no holiday calendar)"""

from datetime import date, timedelta

SATURDAY = 5


def is_business_day(day: date) -> bool:
    """Saturday and Sunday are the only non-business days"""
    return day.weekday() < SATURDAY


def business_days_between(start: date, end: date) -> int:
    """
    Count business days strictly between start and end (both exclusive).

    Returns 0 when end is not after start.
    """
    if end <= start:
        return 0

    count = 0
    current = start + timedelta(days=1)
    while current < end:
        if is_business_day(current):
            count += 1
        current += timedelta(days=1)
    return count


def add_business_days(from_date: date, days: int) -> date:
    """Add business days to a date, skipping weekends (holidays are not accounted for)"""
    current = from_date
    added = 0
    while added < days:
        current += timedelta(days=1)
        if is_business_day(current):
            added += 1
    return current
