"""
WeekFitter — Sport summaries.

Scalar totals, per-sport duration sums and the percentage distribution for
the dashboard, plus the per-week sport minutes shown beside the month view
of the calendar.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import datetime, timedelta

from weekfitter.core.period_resolver import month_interval, start_of_week
from weekfitter.core.trend_aggregator import event_distance
from weekfitter.data.models import (
    SPORT_ORDER,
    EventRecord,
    SportDetail,
    SportShare,
    SportSummary,
    SportType,
    Totals,
    WeekSummary,
)

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def event_duration(event: EventRecord) -> float:
    """Recorded duration in minutes; missing or non-numeric → 0."""
    detail = event.detail
    if isinstance(detail, SportDetail) and isinstance(detail.duration, (int, float)):
        return float(detail.duration)
    return 0.0


def _sport_of(event: EventRecord) -> SportType:
    detail = event.detail
    if isinstance(detail, SportDetail):
        return detail.sport_type
    return SportType.OTHER


def _minutes_by_sport(events: Iterable[EventRecord]) -> dict[SportType, float]:
    sums = {sport: 0.0 for sport in SPORT_ORDER}
    for ev in events:
        sums[_sport_of(ev)] += event_duration(ev)
    return sums


def totals(events: Iterable[EventRecord]) -> Totals:
    events = list(events)
    return Totals(
        distance_km=sum(event_distance(ev) for ev in events),
        duration_min=sum(event_duration(ev) for ev in events),
        activities=len(events),
    )


def duration_by_sport(events: Iterable[EventRecord]) -> list[SportSummary]:
    """One entry per sport type, in fixed order, even when zero."""
    sums = _minutes_by_sport(events)
    divisor = sum(sums.values()) or 1
    return [
        SportSummary(
            sport_type=sport,
            total_minutes=_round_half_up(sums[sport]),
            percent_of_total=_round_half_up(100 * sums[sport] / divisor),
        )
        for sport in SPORT_ORDER
    ]


def distribution(events: Iterable[EventRecord]) -> list[SportShare]:
    """Share of total minutes per sport type.

    A zero total is floored to 1 so every percentage reports 0.
    """
    sums = _minutes_by_sport(events)
    divisor = sum(sums.values()) or 1
    return [
        SportShare(
            sport_type=sport,
            minutes=sums[sport],
            percent=_round_half_up(100 * sums[sport] / divisor),
        )
        for sport in SPORT_ORDER
    ]


# ---------------------------------------------------------------------------
# Month view side panel
# ---------------------------------------------------------------------------


def weekly_summaries(events: Iterable[EventRecord], anchor: datetime) -> list[WeekSummary]:
    """Per-sport minutes for every Monday-started week touching ``anchor``'s month."""
    sport_events = [ev for ev in events if ev.is_sport]
    month = month_interval(anchor)

    summaries: list[WeekSummary] = []
    monday = start_of_week(month.start)
    while monday < month.end:
        next_monday = monday + timedelta(days=7)
        in_week = [ev for ev in sport_events if monday <= ev.start < next_monday]
        summaries.append(
            WeekSummary(
                week_start=monday.date(),
                week_end=(next_monday - timedelta(days=1)).date(),
                minutes_by_sport=_minutes_by_sport(in_week),
            )
        )
        monday = next_monday
    logger.debug(
        "Weekly summaries for %s: %d weeks, %d sport events",
        f"{anchor:%Y-%m}", len(summaries), len(sport_events),
    )
    return summaries


def format_minutes(minutes: float | None) -> str:
    """Render minutes as ``"{h}h {m}m"``."""
    if minutes is None or not math.isfinite(minutes):
        minutes = 0
    whole = int(minutes)
    return f"{whole // 60}h {whole % 60}m"
