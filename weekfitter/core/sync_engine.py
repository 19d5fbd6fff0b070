"""
WeekFitter — Sync Engine.

Orchestrates create / update / delete / move against the event backend and
keeps the EventStore consistent with it:

    validate form -> upload attachment -> build payload -> send -> reload

Create and update only touch the store after the backend has confirmed
(there is no id to insert under before that). Moves and resizes are
optimistic: the store shows the new placement at once, and a full reload
afterwards either confirms it or silently reverts it to what the server
holds. Every write ends with a full reload that is awaited before the
operation returns.

All failures are handled here and returned as a FAILED SyncResult; nothing
propagates to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from weekfitter.core.event_form import EventForm
from weekfitter.core.payload_builder import build_payload, parse_wire_event, record_fields
from weekfitter.data.models import EventRecord
from weekfitter.data.session import SessionClosedError
from weekfitter.ports.event_port import BackendError

if TYPE_CHECKING:
    from weekfitter.core.event_store import EventStore
    from weekfitter.ports.event_port import EventBackend

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


class SyncOutcome(Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class SyncResult:
    kind: SyncOutcome
    message: str
    event: EventRecord | None = None

    @property
    def ok(self) -> bool:
        return self.kind is SyncOutcome.SUCCESS


def _failed(message: str) -> SyncResult:
    return SyncResult(kind=SyncOutcome.FAILED, message=message)


# ---------------------------------------------------------------------------
# Optimistic move command
# ---------------------------------------------------------------------------


@dataclass
class MoveCommand:
    """Drag/resize of one persisted event.

    ``apply_optimistic`` mutates the store, ``send`` pushes the new placement,
    ``reconcile`` always re-fetches the truth. There is no explicit rollback:
    a rejected ``send`` is undone by ``reconcile``.
    """

    store: EventStore
    backend: EventBackend
    event: EventRecord
    new_start: datetime
    new_end: datetime

    def apply_optimistic(self) -> None:
        if self.store.apply_placement(self.event.id, self.new_start, self.new_end) is None:
            logger.debug("Event %s not in store; skipping optimistic placement", self.event.id)

    async def send(self, owner_key: str) -> dict:
        payload = build_payload(self.event, {"start": self.new_start, "end": self.new_end})
        return await self.backend.update_event(owner_key, self.event.id, payload.to_json())

    async def reconcile(self) -> None:
        await self.store.load()

    async def run(self, owner_key: str) -> SyncResult:
        self.apply_optimistic()
        try:
            await self.send(owner_key)
        except BackendError as exc:
            logger.error("Moving event %s failed: %s", self.event.id, exc)
            result = _failed(f"Could not move '{self.event.title}': {exc}")
        else:
            result = SyncResult(
                kind=SyncOutcome.SUCCESS,
                message=f"'{self.event.title}' moved",
            )
        finally:
            await self.reconcile()
        result.event = self.store.get(self.event.id)
        return result


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def _validate(fields: Mapping[str, Any]) -> str | None:
    """Return an error message for an unsavable form, or None."""
    if not str(fields.get("title") or "").strip():
        return "Title is required"
    start, end = fields.get("start"), fields.get("end")
    if start is None or end is None:
        return "Start and end are required"
    if isinstance(start, datetime) and isinstance(end, datetime) and end < start:
        return "End must not be before start"
    return None


class SyncEngine:
    """Write path between the UI and the event backend."""

    def __init__(self, store: EventStore, backend: EventBackend) -> None:
        self._store = store
        self._backend = backend

    @property
    def store(self) -> EventStore:
        return self._store

    async def load(self) -> list[EventRecord]:
        return await self._store.load()

    async def _upload_staged(self, form: EventForm) -> None:
        """Upload a staged attachment and record its stored path on the form."""
        if form.file is None:
            return
        stored = await self._backend.upload_file(form.file.filename, form.file.content)
        form.file_path = stored
        form.file = None

    async def create(self, form: EventForm) -> SyncResult:
        """Persist a new event. The store is only reloaded after success."""
        try:
            owner = self._store.session.require_owner()
        except SessionClosedError as exc:
            logger.warning("Create refused: %s", exc)
            return _failed("Not signed in")

        problem = _validate(form.as_fields())
        if problem:
            return _failed(problem)

        try:
            await self._upload_staged(form)
        except BackendError as exc:
            logger.error("Attachment upload failed: %s", exc)
            return _failed(f"File upload failed: {exc}")

        payload = build_payload(form)
        try:
            data = await self._backend.create_event(owner, payload.to_json())
        except BackendError as exc:
            logger.error("Creating event '%s' failed: %s", form.title, exc)
            return _failed(f"Could not save event: {exc}")

        await self._store.load()
        created = parse_wire_event(data)
        if created is not None and created.id is not None:
            created = self._store.get(created.id) or created
        logger.info("Event '%s' created", form.title)
        return SyncResult(kind=SyncOutcome.SUCCESS, message=f"'{form.title}' saved", event=created)

    async def update(
        self,
        existing: EventRecord | EventForm,
        overrides: Mapping[str, Any] | None = None,
    ) -> SyncResult:
        """Save changes to a persisted event; the store is untouched on failure."""
        if existing.id is None:
            return _failed("Event has not been saved yet")
        try:
            owner = self._store.session.require_owner()
        except SessionClosedError as exc:
            logger.warning("Update refused: %s", exc)
            return _failed("Not signed in")

        fields = record_fields(existing) if isinstance(existing, EventRecord) else existing.as_fields()
        problem = _validate({**fields, **{k: v for k, v in (overrides or {}).items() if v is not None}})
        if problem:
            return _failed(problem)

        if isinstance(existing, EventForm):
            try:
                await self._upload_staged(existing)
            except BackendError as exc:
                logger.error("Attachment upload failed: %s", exc)
                return _failed(f"File upload failed: {exc}")

        payload = build_payload(existing, overrides)
        try:
            await self._backend.update_event(owner, existing.id, payload.to_json())
        except BackendError as exc:
            logger.error("Updating event %s failed: %s", existing.id, exc)
            return _failed(f"Could not save event: {exc}")

        await self._store.load()
        logger.info("Event %s updated", existing.id)
        return SyncResult(
            kind=SyncOutcome.SUCCESS,
            message=f"'{payload.title}' saved",
            event=self._store.get(existing.id),
        )

    async def remove(self, event_id: str) -> SyncResult:
        """Delete an event, then reload whatever the outcome."""
        try:
            await self._backend.delete_event(event_id)
        except BackendError as exc:
            logger.error("Deleting event %s failed: %s", event_id, exc)
            result = _failed(f"Could not delete event: {exc}")
        else:
            self._store.discard(event_id)
            result = SyncResult(kind=SyncOutcome.SUCCESS, message="Event deleted")
        await self._store.load()
        return result

    async def move_or_resize(
        self,
        event: EventRecord,
        new_start: datetime,
        new_end: datetime,
    ) -> SyncResult:
        """Drag/resize path: optimistic placement, update, then always reload."""
        if event.id is None:
            return _failed("Event has not been saved yet")
        try:
            owner = self._store.session.require_owner()
        except SessionClosedError as exc:
            logger.warning("Move refused: %s", exc)
            return _failed("Not signed in")

        command = MoveCommand(
            store=self._store,
            backend=self._backend,
            event=event,
            new_start=new_start,
            new_end=new_end,
        )
        return await command.run(owner)
