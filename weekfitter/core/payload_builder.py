"""
WeekFitter — Payload Builder.

Converts event or form state into the normalized JSON body the backend
expects, and converts backend event objects back into EventRecords.

The category decides which field group reaches the wire: SPORT sends the
sport fields and forces ``allDay`` off, every other category sends the
generic description and nulls every sport field. Residual values kept in
memory after a category switch never leak out.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from weekfitter.data.models import (
    Category,
    EventRecord,
    PlainDetail,
    SportDetail,
    SportType,
)

logger = logging.getLogger(__name__)

WIRE_TIME_FORMAT = "%Y-%m-%dT%H:%M"


# ---------------------------------------------------------------------------
# Wire contracts
# ---------------------------------------------------------------------------


class WirePayload(BaseModel):
    """Request body for POST/PUT /api/events.

    JSON example (SPORT):
    {
        "title": "Morning run",
        "description": "",
        "startTime": "2024-06-03T09:00",
        "endTime": "2024-06-03T09:30",
        "category": "SPORT",
        "allDay": false,
        "duration": 30,
        "distance": 5,
        "sportDescription": "",
        "sportType": "RUNNING",
        "filePath": null,
        "notifications": [60]
    }
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str | None = None
    title: str
    description: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    category: str
    all_day: bool = Field(alias="allDay")
    duration: float | None = None
    distance: float | None = None
    sport_description: str | None = Field(default=None, alias="sportDescription")
    sport_type: str | None = Field(default=None, alias="sportType")
    file_path: str | None = Field(default=None, alias="filePath")
    notifications: list[int] = Field(default_factory=list)

    def to_json(self) -> dict:
        """Camel-case dict ready for ``httpx`` ``json=``; ``id`` omitted until persisted."""
        exclude = {"id"} if self.id is None else None
        data = self.model_dump(by_alias=True, exclude=exclude)
        for key in ("duration", "distance"):
            value = data[key]
            if value is not None and float(value).is_integer():
                data[key] = int(value)
        return data


class WireEvent(BaseModel):
    """One element of the GET /api/events response array."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    title: str = ""
    description: str | None = None
    start_time: datetime = Field(alias="startTime")
    end_time: datetime = Field(alias="endTime")
    category: str | None = None
    all_day: bool = Field(default=False, alias="allDay")
    duration: float | None = None
    distance: float | None = None
    sport_description: str | None = Field(default=None, alias="sportDescription")
    sport_type: str | None = Field(default=None, alias="sportType")
    file_path: str | None = Field(default=None, alias="filePath")
    notifications: list[int] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("title", mode="before")
    @classmethod
    def title_or_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("description", "category", "sport_description", "sport_type", "file_path", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("all_day", mode="before")
    @classmethod
    def truthy_all_day(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("duration", "distance", mode="before")
    @classmethod
    def lenient_number(cls, v: Any) -> float | None:
        return _to_number(v)

    @field_validator("notifications", mode="before")
    @classmethod
    def notifications_or_empty(cls, v: Any) -> list[int]:
        if not isinstance(v, (list, tuple)):
            return []
        # Unparseable entries are skipped, the record is kept
        minutes = (_to_number(item) for item in v)
        return [int(m) for m in minutes if m is not None]

    @field_validator("start_time", "end_time", mode="after")
    @classmethod
    def local_minute(cls, v: datetime) -> datetime:
        if v.tzinfo is not None:
            v = v.astimezone().replace(tzinfo=None)
        return v.replace(second=0, microsecond=0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_number(value: Any) -> float | None:
    """Parse a number leniently; blanks, garbage and NaN become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _to_datetime(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def format_wire_time(value: datetime | str) -> str:
    """Normalize a timestamp to the minute-resolution wire format."""
    return _to_datetime(value).strftime(WIRE_TIME_FORMAT)


def record_fields(record: EventRecord) -> dict[str, Any]:
    """Flatten an EventRecord into the form-field vocabulary."""
    fields: dict[str, Any] = {
        "id": record.id,
        "title": record.title,
        "category": record.category,
        "start": record.start,
        "end": record.end,
        "file_path": record.file_path,
        "notifications": list(record.notifications),
    }
    detail = record.detail
    if isinstance(detail, SportDetail):
        fields.update(
            all_day=False,
            sport_type=detail.sport_type,
            duration=detail.duration,
            distance=detail.distance,
            sport_description=detail.description,
        )
    else:
        fields.update(description=detail.description, all_day=detail.all_day)
    return fields


def _fields_of(base: Any) -> Mapping[str, Any]:
    if isinstance(base, EventRecord):
        return record_fields(base)
    if isinstance(base, Mapping):
        return base
    return base.as_fields()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_payload(base: Any, overrides: Mapping[str, Any] | None = None) -> WirePayload:
    """Build the wire payload for ``base`` with ``overrides`` applied on top.

    Args:
        base: An EventRecord, an EventForm, or a mapping of form fields.
        overrides: Form fields that win over ``base``; a None value means
            "not overridden".

    Returns:
        A frozen WirePayload. Deterministic: same inputs, same output.
    """
    fields = _fields_of(base)
    overrides = overrides or {}

    def pick(name: str, default: Any = None) -> Any:
        value = overrides.get(name)
        if value is None:
            value = fields.get(name)
        return default if value is None else value

    category = Category.coerce(pick("category", Category.OTHER))
    is_sport = category is Category.SPORT

    start = overrides.get("start") or fields.get("start")
    end = overrides.get("end") or fields.get("end")
    if not start or not end:
        raise ValueError("Event start and end are required")

    if is_sport:
        sport_description = str(pick("sport_description", ""))
        return WirePayload(
            id=pick("id"),
            title=str(pick("title", "")),
            description=sport_description,
            start_time=format_wire_time(start),
            end_time=format_wire_time(end),
            category=category.value,
            all_day=False,
            duration=_to_number(pick("duration")) or None,
            distance=_to_number(pick("distance")) or None,
            sport_description=sport_description,
            sport_type=SportType.coerce(pick("sport_type", SportType.OTHER)).value,
            file_path=pick("file_path"),
            notifications=list(pick("notifications", [])),
        )

    return WirePayload(
        id=pick("id"),
        title=str(pick("title", "")),
        description=str(pick("description", "")),
        start_time=format_wire_time(start),
        end_time=format_wire_time(end),
        category=category.value,
        all_day=bool(pick("all_day", False)),
        duration=None,
        distance=None,
        sport_description=None,
        sport_type=None,
        file_path=pick("file_path"),
        notifications=list(pick("notifications", [])),
    )


def parse_wire_event(raw: Any) -> EventRecord | None:
    """Convert one backend event object into an EventRecord.

    Returns None when the object is not a mapping or its start/end do not
    parse as timestamps; callers drop such records.
    """
    if not isinstance(raw, Mapping):
        logger.debug("Skipping non-object event entry: %r", raw)
        return None
    try:
        wire = WireEvent.model_validate(raw)
    except ValidationError as exc:
        logger.debug("Skipping invalid event %r: %s", raw.get("id"), exc)
        return None

    category = Category.coerce(wire.category)
    if category is Category.SPORT:
        detail: SportDetail | PlainDetail = SportDetail(
            sport_type=SportType.coerce(wire.sport_type),
            duration=wire.duration,
            distance=wire.distance,
            description=wire.sport_description or wire.description or "",
        )
    else:
        detail = PlainDetail(description=wire.description or "", all_day=wire.all_day)

    return EventRecord(
        id=wire.id,
        title=wire.title,
        category=category,
        start=wire.start_time,
        end=wire.end_time,
        detail=detail,
        file_path=wire.file_path,
        notifications=list(wire.notifications),
    )
