from calendar import monthrange
from datetime import date


def add_months(d: date, months: int) -> date:
    """Same day ``months`` later, clamped to the last day of a shorter month."""
    idx = d.month - 1 + months
    year = d.year + idx // 12
    month = idx % 12 + 1
    day = min(d.day, monthrange(year, month)[1])
    return date(year, month, day)


def month_start(d: date) -> date:
    return date(d.year, d.month, 1)


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"
