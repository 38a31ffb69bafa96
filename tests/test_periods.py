from __future__ import annotations

from datetime import datetime

from play_activity.periods import ViewPeriod, align_to_period, period_bounds, shift_period


def test_day_bounds_cover_whole_local_day():
    start, end = period_bounds(datetime(2024, 3, 15, 13, 45), ViewPeriod.DAY)

    assert start == int(datetime(2024, 3, 15).timestamp())
    assert end == int(datetime(2024, 3, 16).timestamp()) - 1


def test_month_and_year_alignment():
    anchor = datetime(2024, 3, 15, 13, 45)

    assert align_to_period(anchor, ViewPeriod.MONTH) == datetime(2024, 3, 1)
    assert align_to_period(anchor, ViewPeriod.YEAR) == datetime(2024, 1, 1)


def test_month_bounds_roll_over_year():
    start, end = period_bounds(datetime(2023, 12, 31), ViewPeriod.MONTH)

    assert start == int(datetime(2023, 12, 1).timestamp())
    assert end == int(datetime(2024, 1, 1).timestamp()) - 1


def test_shift_by_months_and_years():
    anchor = datetime(2024, 1, 31)

    assert shift_period(anchor, ViewPeriod.MONTH, -1) == datetime(2023, 12, 1)
    assert shift_period(anchor, ViewPeriod.MONTH, 13) == datetime(2025, 2, 1)
    assert shift_period(anchor, ViewPeriod.YEAR, 2) == datetime(2026, 1, 1)
    assert shift_period(anchor, ViewPeriod.DAY, 1) == datetime(2024, 2, 1)


def test_shift_is_clamped_to_supported_years():
    assert shift_period(datetime(2000, 1, 1), ViewPeriod.DAY, -1) == datetime(2000, 1, 1)
    assert shift_period(datetime(2060, 6, 1), ViewPeriod.YEAR, 1) == datetime(2060, 1, 1)
    assert shift_period(datetime(2060, 12, 31), ViewPeriod.DAY, 1) == datetime(2060, 12, 31)
