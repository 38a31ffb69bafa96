"""Calendar periods used to pick ranges for recent statistics."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

MIN_DATE = datetime(2000, 1, 1)
MAX_DATE = datetime(2060, 12, 31)


class ViewPeriod(str, Enum):
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


def align_to_period(anchor: datetime, period: ViewPeriod) -> datetime:
    """Return the first instant of the day, month or year containing ``anchor``."""
    aligned = anchor.replace(hour=0, minute=0, second=0, microsecond=0)
    if period is ViewPeriod.MONTH:
        aligned = aligned.replace(day=1)
    elif period is ViewPeriod.YEAR:
        aligned = aligned.replace(month=1, day=1)
    return aligned


def period_bounds(anchor: datetime, period: ViewPeriod) -> tuple[int, int]:
    """Return inclusive POSIX bounds of the period containing ``anchor``."""
    start = align_to_period(anchor, period)
    end = _advance(start, period, 1)
    return int(start.timestamp()), int(end.timestamp()) - 1


def shift_period(anchor: datetime, period: ViewPeriod, steps: int) -> datetime:
    """Move ``anchor`` by whole periods, staying within 2000-2060."""
    shifted = _advance(align_to_period(anchor, period), period, steps)
    lower = align_to_period(MIN_DATE, period)
    upper = align_to_period(MAX_DATE, period)
    return min(max(shifted, lower), upper)


def _advance(start: datetime, period: ViewPeriod, steps: int) -> datetime:
    if period is ViewPeriod.DAY:
        return start + timedelta(days=steps)
    if period is ViewPeriod.MONTH:
        months = start.year * 12 + (start.month - 1) + steps
        year, month = divmod(months, 12)
        return start.replace(year=year, month=month + 1, day=1)
    return start.replace(year=start.year + steps, month=1, day=1)
