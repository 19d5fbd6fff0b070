"""Shared test fixtures and configuration.

Sets deterministic environment variables before any weekfitter import so
weekfitter.config never reads a developer's .env values, and provides a
mocked backend, a session and ready-made events.
"""

import os

# Patch env vars BEFORE any weekfitter imports
os.environ.setdefault("API_URL", "http://backend.test")
os.environ.setdefault("REQUEST_TIMEOUT_SECONDS", "5")
os.environ.setdefault("OWNER_EMAIL", "")
os.environ.setdefault("DEFAULT_NOTIFICATIONS", "60")

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest


def _wire_event(**overrides) -> dict:
    """A backend event object; a 30-minute RUNNING session by default."""
    data = {
        "id": 1,
        "title": "Morning run",
        "description": "",
        "startTime": "2024-06-03T08:00",
        "endTime": "2024-06-03T08:30",
        "category": "SPORT",
        "allDay": False,
        "duration": 30,
        "distance": 5,
        "sportDescription": "",
        "sportType": "RUNNING",
        "filePath": None,
        "notifications": [60],
    }
    data.update(overrides)
    return data


def _sport_event(sport="RUNNING", start="2024-06-03T08:00", minutes=30, distance=5.0, event_id="1"):
    from weekfitter.data.models import Category, EventRecord, SportDetail, SportType

    start_dt = datetime.fromisoformat(start)
    return EventRecord(
        id=event_id,
        title=f"{sport.title()} session",
        category=Category.SPORT,
        start=start_dt,
        end=start_dt + timedelta(minutes=minutes or 30),
        detail=SportDetail(sport_type=SportType(sport), duration=minutes, distance=distance),
    )


@pytest.fixture
def make_wire_event():
    return _wire_event


@pytest.fixture
def make_sport_event():
    return _sport_event


@pytest.fixture
def session():
    from weekfitter.data.session import Session
    return Session.sign_in("runner@example.com")


@pytest.fixture
def backend():
    """EventBackend double with every coroutine mocked."""
    mock = MagicMock()
    mock.list_events = AsyncMock(return_value=[])
    mock.create_event = AsyncMock(return_value={})
    mock.update_event = AsyncMock(return_value={})
    mock.delete_event = AsyncMock(return_value=None)
    mock.upload_file = AsyncMock(return_value="uploads/file.gpx")
    return mock


@pytest.fixture
def store(backend, session):
    from weekfitter.core.event_store import EventStore
    return EventStore(backend, session)


@pytest.fixture
def engine(store, backend):
    from weekfitter.core.sync_engine import SyncEngine
    return SyncEngine(store, backend)
