"""Tests for weekfitter.core.period_resolver — pure window arithmetic."""

from datetime import datetime

import pytest

from weekfitter.core.period_resolver import Period, month_interval, resolve, start_of_week
from weekfitter.data.models import Interval

NOW = datetime(2024, 6, 5, 14, 37)  # Wednesday


class TestResolve:
    def test_day(self):
        assert resolve("day", NOW) == Interval(datetime(2024, 6, 5), datetime(2024, 6, 6))

    def test_week_starts_monday(self):
        assert resolve(Period.WEEK, NOW) == Interval(datetime(2024, 6, 3), datetime(2024, 6, 10))

    def test_week_on_sunday(self):
        sunday = datetime(2024, 6, 9, 23, 59)
        assert resolve(Period.WEEK, sunday).start == datetime(2024, 6, 3)

    def test_week_across_year_boundary(self):
        interval = resolve(Period.WEEK, datetime(2025, 1, 1, 9))
        assert interval == Interval(datetime(2024, 12, 30), datetime(2025, 1, 6))

    def test_month(self):
        assert resolve("month", NOW) == Interval(datetime(2024, 6, 1), datetime(2024, 7, 1))

    def test_december(self):
        assert resolve("month", datetime(2024, 12, 31, 23)) == Interval(
            datetime(2024, 12, 1), datetime(2025, 1, 1),
        )

    def test_year(self):
        assert resolve("year", NOW) == Interval(datetime(2024, 1, 1), datetime(2025, 1, 1))

    def test_all_is_unbounded(self):
        assert resolve("all", NOW) is None

    def test_unknown_period_raises(self):
        with pytest.raises(ValueError):
            resolve("fortnight", NOW)

    def test_defaults_to_wall_clock(self):
        interval = resolve("day")
        assert interval.contains(datetime.now())


class TestInterval:
    def test_half_open(self):
        interval = resolve("day", NOW)
        assert interval.contains(datetime(2024, 6, 5, 0, 0))
        assert interval.contains(datetime(2024, 6, 5, 23, 59))
        assert not interval.contains(datetime(2024, 6, 6, 0, 0))

    def test_days_of_week(self):
        days = resolve("week", NOW).days()
        assert len(days) == 7
        assert days[0].isoformat() == "2024-06-03"
        assert days[-1].isoformat() == "2024-06-09"

    def test_days_of_february_leap_year(self):
        assert len(month_interval(datetime(2024, 2, 10)).days()) == 29

    def test_days_of_single_day(self):
        assert len(resolve("day", NOW).days()) == 1


def test_start_of_week_is_midnight_monday():
    assert start_of_week(NOW) == datetime(2024, 6, 3, 0, 0)
