"""Distance trend series — time-bucketed aggregation.

Buckets sport events by day, ISO week or month depending on the selected
period and sums their distance. Events are expected pre-filtered by period
window and sport type; the bucket span itself is driven by the period (and
its window), never by which events happen to be present.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from weekfitter.core.period_resolver import Period, resolve, start_of_week
from weekfitter.data.models import AggregatedBucket, EventRecord, Interval, SportDetail

logger = logging.getLogger(__name__)

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def event_distance(event: EventRecord) -> float:
    """Distance in km; missing or non-sport → 0."""
    detail = event.detail
    if isinstance(detail, SportDetail) and isinstance(detail.distance, (int, float)):
        return float(detail.distance)
    return 0.0


def _iso_week_key(day: date) -> str:
    iso_year, week, _ = day.isocalendar()
    return f"{iso_year}-W{week:02d}"


def _daily(events: Iterable[EventRecord], span: Interval) -> list[AggregatedBucket]:
    # Zero-seeded: one bucket per day of the span, in order
    sums: dict[date, float] = {day: 0.0 for day in span.days()}
    for ev in events:
        day = ev.start.date()
        if day in sums:
            sums[day] += event_distance(ev)
    return [
        AggregatedBucket(key=day.isoformat(), label=f"{day.day}.{day.month}.", value=round(total, 2))
        for day, total in sums.items()
    ]


def _weekly(events: Iterable[EventRecord], span: Interval) -> list[AggregatedBucket]:
    sums: dict[str, float] = {}
    monday = start_of_week(span.start)
    while monday < span.end:
        sums[_iso_week_key(monday.date())] = 0.0
        monday += timedelta(days=7)

    for ev in events:
        key = _iso_week_key(ev.start.date())
        if key in sums:
            sums[key] += event_distance(ev)
    return [
        AggregatedBucket(key=key, label=_week_label(key, span.start.year), value=round(total, 2))
        for key, total in sums.items()
    ]


def _week_label(key: str, year: int) -> str:
    # Weeks owned by a neighbouring ISO year carry that year
    iso_year, week = key.split("-")
    if int(iso_year) == year:
        return week
    return f"{week} {iso_year}"


def _monthly(events: Iterable[EventRecord]) -> list[AggregatedBucket]:
    # Only months that have data appear
    sums: dict[str, float] = {}
    for ev in events:
        key = f"{ev.start.year:04d}-{ev.start.month:02d}"
        sums[key] = sums.get(key, 0.0) + event_distance(ev)
    buckets = []
    for key in sorted(sums):
        year, month = key.split("-")
        buckets.append(
            AggregatedBucket(
                key=key,
                label=f"{_MONTH_ABBR[int(month) - 1]} {year}",
                value=round(sums[key], 2),
            )
        )
    return buckets


def bucketize(
    events: Iterable[EventRecord],
    period: Period | str,
    interval: Interval | None = None,
    now: datetime | None = None,
) -> list[AggregatedBucket]:
    """Build the distance trend for ``period``.

    Args:
        events: Sport events already filtered to the window and sport type.
        period: Selected period key.
        interval: The resolved window; resolved from ``now`` when omitted.
        now: Anchor used only when ``interval`` is omitted.

    Returns:
        Daily buckets for day/week/month, ISO-week buckets for year,
        ascending ``YYYY-MM`` buckets for all. Values are km rounded to 2
        decimals.
    """
    period = Period(period)
    events = list(events)

    if period is Period.ALL:
        return _monthly(events)

    span = interval or resolve(period, now)
    if period is Period.YEAR:
        buckets = _weekly(events, span)
    else:
        buckets = _daily(events, span)
    logger.debug("Bucketized %d events into %d %s buckets", len(events), len(buckets), period.value)
    return buckets
