"""Date manipulation utilities"""

from datetime import date

from dateutil.relativedelta import relativedelta

DAYS_PER_YEAR = 365.25


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping to the last day of shorter months (Jan 31 + 1 -> Feb 28/29)"""
    return from_date + relativedelta(months=months)


def years_between(start: date, end: date, min_days: int = 1) -> float:
    """Fractional years from start to end, floored at min_days so same-day spans never yield zero"""
    days = max((end - start).days, min_days)
    return days / DAYS_PER_YEAR
