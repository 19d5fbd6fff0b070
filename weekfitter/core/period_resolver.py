"""Dashboard period resolution — pure date arithmetic.

Maps a period key to a half-open window anchored on "now". Windows are
relative to the wall clock at the moment of the call, so callers re-resolve
whenever the period selection changes.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from weekfitter.data.models import Interval


class Period(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


def _midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(moment: datetime) -> datetime:
    """Monday 00:00 of the ISO week containing ``moment``."""
    return _midnight(moment) - timedelta(days=moment.weekday())


def _next_month(moment: datetime) -> datetime:
    if moment.month == 12:
        return moment.replace(year=moment.year + 1, month=1)
    return moment.replace(month=moment.month + 1)


def month_interval(moment: datetime) -> Interval:
    first = _midnight(moment).replace(day=1)
    return Interval(start=first, end=_next_month(first))


def resolve(period: Period | str, now: datetime | None = None) -> Interval | None:
    """Return the window for ``period``, or None for ``all`` (unbounded).

    Raises ValueError for an unknown period key.
    """
    period = Period(period)
    now = now or datetime.now()

    if period is Period.DAY:
        start = _midnight(now)
        return Interval(start=start, end=start + timedelta(days=1))
    if period is Period.WEEK:
        start = start_of_week(now)
        return Interval(start=start, end=start + timedelta(days=7))
    if period is Period.MONTH:
        return month_interval(now)
    if period is Period.YEAR:
        start = _midnight(now).replace(month=1, day=1)
        return Interval(start=start, end=start.replace(year=start.year + 1))
    return None
