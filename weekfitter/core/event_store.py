"""
WeekFitter — Event Store.

Holds the signed-in user's events in memory. Every reconciliation is a full
reload that replaces the whole list; there is no incremental merge.

Readers (calendar view, dashboard) get tuple snapshots and must treat them
as read-only. Only EventStore and SyncEngine mutate the list.
"""

from __future__ import annotations

import logging
from dataclasses import replace as dc_replace
from datetime import datetime
from typing import TYPE_CHECKING

from weekfitter.core.payload_builder import parse_wire_event
from weekfitter.data.models import EventRecord
from weekfitter.data.session import SessionClosedError
from weekfitter.ports.event_port import BackendError

if TYPE_CHECKING:
    from weekfitter.data.session import Session
    from weekfitter.ports.event_port import EventBackend

logger = logging.getLogger(__name__)


class EventStore:
    """In-memory event list for one session."""

    def __init__(self, backend: EventBackend, session: Session) -> None:
        self._backend = backend
        self._session = session
        self._events: list[EventRecord] = []

    @property
    def session(self) -> Session:
        return self._session

    def snapshot(self) -> tuple[EventRecord, ...]:
        return tuple(self._events)

    def sport_events(self) -> tuple[EventRecord, ...]:
        return tuple(ev for ev in self._events if ev.is_sport)

    def get(self, event_id: str) -> EventRecord | None:
        for ev in self._events:
            if ev.id == event_id:
                return ev
        return None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self, owner_key: str | None = None) -> list[EventRecord]:
        """Fetch all events of the owner and replace the in-memory list.

        Records whose start/end do not parse are dropped. Any backend failure
        or a response that is not a JSON array leaves an empty list rather
        than raising.
        """
        try:
            owner = owner_key or self._session.require_owner()
        except SessionClosedError as exc:
            logger.warning("Not loading events: %s", exc)
            self.replace([])
            return []

        try:
            raw = await self._backend.list_events(owner)
        except BackendError as exc:
            logger.warning("Loading events for %s failed: %s", owner, exc)
            self.replace([])
            return []

        if not isinstance(raw, list):
            logger.warning("Backend did not return an event array: %r", raw)
            self.replace([])
            return []

        records = [rec for rec in map(parse_wire_event, raw) if rec is not None]
        dropped = len(raw) - len(records)
        if dropped:
            logger.info("Dropped %d event(s) with invalid timestamps", dropped)

        self.replace(records)
        logger.debug("Loaded %d event(s) for %s", len(records), owner)
        return list(records)

    def replace(self, events: list[EventRecord]) -> None:
        """Overwrite the whole collection."""
        self._events = list(events)

    # ------------------------------------------------------------------
    # Local mutations (SyncEngine only)
    # ------------------------------------------------------------------

    def apply_placement(self, event_id: str, start: datetime, end: datetime) -> EventRecord | None:
        """Optimistically move an entry; returns the pre-move record, or None if absent."""
        for index, ev in enumerate(self._events):
            if ev.id == event_id:
                self._events[index] = dc_replace(ev, start=start, end=end)
                return ev
        return None

    def discard(self, event_id: str) -> bool:
        before = len(self._events)
        self._events = [ev for ev in self._events if ev.id != event_id]
        return len(self._events) != before
