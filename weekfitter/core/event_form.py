"""
WeekFitter — Event edit form.

Flat, mutable state behind the add/edit dialog. Unlike EventRecord it keeps
both field groups at once, so switching a SPORT event to WORK and back does
not lose the sport values typed so far. Only build_payload decides what is
sent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from weekfitter.config import ALLOWED_NOTIFICATION_MINUTES, settings
from weekfitter.data.models import Category, EventRecord, SportDetail, SportType

logger = logging.getLogger(__name__)

_DEFAULT_SLOT_MINUTES = 30
_DEFAULT_SPAN_AFTER_MOVE = 60
_MONTH_VIEW_START_HOUR = 8


@dataclass
class UploadFile:
    """An attachment staged in the form, uploaded before the event is saved."""

    filename: str
    content: bytes


def _parse_minutes(value: Any) -> int | None:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


@dataclass
class EventForm:
    title: str = ""
    category: Category = Category.OTHER
    start: datetime | None = None
    end: datetime | None = None
    all_day: bool = False
    description: str = ""
    sport_type: SportType = SportType.OTHER
    duration: str = ""          # raw text as typed
    distance: str = ""          # raw text as typed
    sport_description: str = ""
    file_path: str | None = None
    file: UploadFile | None = None
    notifications: list[int] = field(
        default_factory=lambda: list(settings.DEFAULT_NOTIFICATIONS)
    )
    id: str | None = None

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def for_slot(cls, start: datetime, month_view: bool = False) -> "EventForm":
        """New-event form for a clicked calendar slot.

        In month view the slot has no meaningful time, so the event is
        placed at 08:00–08:30 on that day.
        """
        if month_view:
            start = start.replace(
                hour=_MONTH_VIEW_START_HOUR, minute=0, second=0, microsecond=0,
            )
        else:
            start = start.replace(second=0, microsecond=0)
        return cls(start=start, end=start + timedelta(minutes=_DEFAULT_SLOT_MINUTES))

    @classmethod
    def from_record(cls, record: EventRecord) -> "EventForm":
        form = cls(
            id=record.id,
            title=record.title,
            category=record.category,
            start=record.start,
            end=record.end,
            file_path=record.file_path,
            notifications=list(record.notifications),
        )
        detail = record.detail
        if isinstance(detail, SportDetail):
            form.sport_type = detail.sport_type
            form.duration = _number_text(detail.duration)
            form.distance = _number_text(detail.distance)
            form.sport_description = detail.description
        else:
            form.description = detail.description
            form.all_day = detail.all_day
        return form

    # ------------------------------------------------------------------
    # Editing rules
    # ------------------------------------------------------------------

    def change_category(self, category: Category | str) -> None:
        self.category = Category.coerce(category)
        if self.category is Category.SPORT:
            self.all_day = False

    def change_duration(self, value: str) -> None:
        """Store the typed duration; a whole number of minutes also moves the end."""
        self.duration = value
        minutes = _parse_minutes(value)
        if minutes is not None and self.start is not None:
            self.end = self.start + timedelta(minutes=minutes)

    def change_start(self, new_start: datetime) -> None:
        """Move the start and derive the end.

        With a known duration the end follows it. Otherwise an end the user
        has already adjusted (span differs from the 30-minute default by more
        than a minute) is kept, and an untouched one becomes start + 1 hour.
        """
        new_start = new_start.replace(second=0, microsecond=0)
        minutes = _parse_minutes(self.duration)
        if minutes is not None:
            self.start = new_start
            self.end = new_start + timedelta(minutes=minutes)
            return

        manually_changed = False
        if self.start is not None and self.end is not None:
            span = self.end - self.start
            manually_changed = abs(span - timedelta(minutes=_DEFAULT_SLOT_MINUTES)) > timedelta(minutes=1)

        self.start = new_start
        if not manually_changed:
            self.end = new_start + timedelta(minutes=_DEFAULT_SPAN_AFTER_MOVE)

    def toggle_notification(self, minutes: int) -> None:
        if minutes not in ALLOWED_NOTIFICATION_MINUTES:
            raise ValueError(f"Unsupported notification lead time: {minutes}")
        if minutes in self.notifications:
            self.notifications.remove(minutes)
        else:
            self.notifications.append(minutes)
            self.notifications.sort()

    def attach_file(self, filename: str, content: bytes) -> None:
        self.file = UploadFile(filename=filename, content=content)
        logger.debug("Staged attachment '%s' (%d bytes)", filename, len(content))

    # ------------------------------------------------------------------
    # Payload view
    # ------------------------------------------------------------------

    def as_fields(self) -> dict[str, Any]:
        """Field mapping consumed by build_payload."""
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "start": self.start,
            "end": self.end,
            "all_day": self.all_day,
            "description": self.description,
            "sport_type": self.sport_type,
            "duration": self.duration,
            "distance": self.distance,
            "sport_description": self.sport_description,
            "file_path": self.file_path,
            "notifications": list(self.notifications),
        }


def _number_text(value: float | None) -> str:
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)
