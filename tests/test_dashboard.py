"""Tests for weekfitter.core.dashboard — filtering and composition."""

from datetime import datetime

import pytest

from weekfitter.core.dashboard import build_dashboard, filter_sport_events
from weekfitter.core.period_resolver import Period, resolve
from weekfitter.data.models import Category, EventRecord, PlainDetail, SportType, Totals

NOW = datetime(2024, 6, 5, 12, 0)


@pytest.fixture
def mixed_events(make_sport_event):
    return [
        make_sport_event("RUNNING", "2024-06-03T07:00", minutes=60, distance=10, event_id="1"),
        make_sport_event("CYCLING", "2024-06-04T07:00", minutes=30, distance=15, event_id="2"),
        make_sport_event("SWIMMING", "2024-06-05T07:00", minutes=0, distance=None, event_id="3"),
        make_sport_event("RUNNING", "2024-05-20T07:00", minutes=45, distance=8, event_id="4"),
        EventRecord(
            id="5", title="Office", category=Category.WORK,
            start=datetime(2024, 6, 4, 9), end=datetime(2024, 6, 4, 17),
            detail=PlainDetail(),
        ),
    ]


class TestFilterSportEvents:
    def test_drops_non_sport(self, mixed_events):
        kept = filter_sport_events(mixed_events, None)
        assert [ev.id for ev in kept] == ["1", "2", "3", "4"]

    def test_window(self, mixed_events):
        kept = filter_sport_events(mixed_events, resolve("week", NOW))
        assert [ev.id for ev in kept] == ["1", "2", "3"]

    def test_sport_type(self, mixed_events):
        kept = filter_sport_events(mixed_events, None, SportType.RUNNING)
        assert [ev.id for ev in kept] == ["1", "4"]

    def test_sport_type_as_text(self, mixed_events):
        kept = filter_sport_events(mixed_events, None, "CYCLING")
        assert [ev.id for ev in kept] == ["2"]


class TestBuildDashboard:
    def test_three_activity_week(self, mixed_events):
        dash = build_dashboard(mixed_events, "week", "ALL", now=NOW)

        assert dash.period is Period.WEEK
        assert dash.totals == Totals(distance_km=25, duration_min=90, activities=3)
        assert [(s.sport_type, s.total_minutes) for s in dash.duration_by_sport] == [
            (SportType.RUNNING, 60),
            (SportType.CYCLING, 30),
            (SportType.SWIMMING, 0),
            (SportType.OTHER, 0),
        ]
        assert len(dash.trend) == 7
        assert [b.value for b in dash.trend[:3]] == [10, 15, 0]

    def test_running_filter(self, mixed_events):
        dash = build_dashboard(mixed_events, "all", SportType.RUNNING, now=NOW)
        assert dash.sport_filter == "RUNNING"
        assert dash.interval is None
        assert dash.totals.activities == 2
        assert [b.key for b in dash.trend] == ["2024-05", "2024-06"]

    def test_day_period(self, mixed_events):
        dash = build_dashboard(mixed_events, "day", now=NOW)
        assert dash.totals.activities == 1
        assert len(dash.trend) == 1
        assert [s.percent for s in dash.distribution] == [0, 0, 0, 0]
