import calendar
from datetime import date


def add_months(value: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length (Jan 31 + 1 -> Feb 28/29)."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def clamp_day(year: int, month: int, day: int) -> date:
    """Return ``year-month-day`` with ``day`` clamped to the month's last day."""
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))
