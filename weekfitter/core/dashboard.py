"""Dashboard composition — filter once, derive every view.

Recomputed from scratch on each call; the event list is read, never
written.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from weekfitter.core import summary_aggregator
from weekfitter.core.period_resolver import Period, resolve
from weekfitter.core.trend_aggregator import bucketize
from weekfitter.data.models import (
    AggregatedBucket,
    EventRecord,
    Interval,
    SportDetail,
    SportShare,
    SportSummary,
    SportType,
    Totals,
)

ALL_SPORTS = "ALL"


@dataclass
class Dashboard:
    period: Period
    sport_filter: str
    interval: Interval | None
    totals: Totals
    trend: list[AggregatedBucket]
    duration_by_sport: list[SportSummary]
    distribution: list[SportShare]


def filter_sport_events(
    events: Iterable[EventRecord],
    interval: Interval | None,
    sport_filter: SportType | str = ALL_SPORTS,
) -> list[EventRecord]:
    """Sport events of the selected type whose start lies in ``interval``."""
    wanted = None if sport_filter == ALL_SPORTS else SportType(sport_filter)
    kept = []
    for ev in events:
        if not isinstance(ev.detail, SportDetail):
            continue
        if wanted is not None and ev.detail.sport_type is not wanted:
            continue
        if interval is not None and not interval.contains(ev.start):
            continue
        kept.append(ev)
    return kept


def build_dashboard(
    events: Iterable[EventRecord],
    period: Period | str = Period.WEEK,
    sport_filter: SportType | str = ALL_SPORTS,
    now: datetime | None = None,
) -> Dashboard:
    period = Period(period)
    interval = resolve(period, now)
    filtered = filter_sport_events(events, interval, sport_filter)
    return Dashboard(
        period=period,
        sport_filter=str(getattr(sport_filter, "value", sport_filter)),
        interval=interval,
        totals=summary_aggregator.totals(filtered),
        trend=bucketize(filtered, period, interval, now),
        duration_by_sport=summary_aggregator.duration_by_sport(filtered),
        distribution=summary_aggregator.distribution(filtered),
    )
