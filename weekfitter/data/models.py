"""
WeekFitter — Data Models.

One schedule entry is an EventRecord. Its category-specific fields live in
a tagged detail: SPORT events carry a SportDetail, every other category a
PlainDetail. The two field groups can never be populated at the same time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Union


class Category(str, Enum):
    SPORT = "SPORT"
    WORK = "WORK"
    SCHOOL = "SCHOOL"
    REST = "REST"
    OTHER = "OTHER"

    @classmethod
    def coerce(cls, value: object) -> "Category":
        """Map a raw value to a Category; unknown or missing → OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class SportType(str, Enum):
    RUNNING = "RUNNING"
    CYCLING = "CYCLING"
    SWIMMING = "SWIMMING"
    OTHER = "OTHER"

    @classmethod
    def coerce(cls, value: object) -> "SportType":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# Fixed order for every per-sport listing
SPORT_ORDER: tuple[SportType, ...] = (
    SportType.RUNNING,
    SportType.CYCLING,
    SportType.SWIMMING,
    SportType.OTHER,
)


@dataclass
class SportDetail:
    """Fields that only exist on SPORT events. Sport events are never all-day."""

    sport_type: SportType = SportType.OTHER
    duration: float | None = None      # minutes
    distance: float | None = None      # kilometers
    description: str = ""


@dataclass
class PlainDetail:
    """Fields for WORK / SCHOOL / REST / OTHER events."""

    description: str = ""
    all_day: bool = False


EventDetail = Union[SportDetail, PlainDetail]


@dataclass
class EventRecord:
    """One schedule entry as held in memory.

    ``id`` is None until the backend has persisted the event.
    Timestamps are naive local wall-clock datetimes at minute resolution.
    """

    title: str
    category: Category
    start: datetime
    end: datetime
    detail: EventDetail = field(default_factory=PlainDetail)
    id: str | None = None
    file_path: str | None = None
    notifications: list[int] = field(default_factory=lambda: [60])

    def __post_init__(self) -> None:
        if self.category is Category.SPORT and not isinstance(self.detail, SportDetail):
            raise ValueError("SPORT events require a SportDetail")
        if self.category is not Category.SPORT and not isinstance(self.detail, PlainDetail):
            raise ValueError(f"{self.category.value} events require a PlainDetail")

    @property
    def is_sport(self) -> bool:
        return isinstance(self.detail, SportDetail)

    @property
    def all_day(self) -> bool:
        if isinstance(self.detail, PlainDetail):
            return self.detail.all_day
        return False


@dataclass(frozen=True)
class Interval:
    """Half-open time window ``[start, end)``."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def days(self) -> list[date]:
        """Every calendar day touched by the window, in order."""
        first = self.start.date()
        last = (self.end - timedelta(microseconds=1)).date()
        count = (last - first).days + 1
        return [first + timedelta(days=i) for i in range(max(count, 0))]


@dataclass
class AggregatedBucket:
    """One slot of a trend series (a day, ISO week or month)."""

    key: str
    label: str
    value: float


@dataclass
class Totals:
    distance_km: float
    duration_min: float
    activities: int


@dataclass
class SportSummary:
    sport_type: SportType
    total_minutes: int
    percent_of_total: int


@dataclass
class SportShare:
    sport_type: SportType
    minutes: float
    percent: int


@dataclass
class WeekSummary:
    """Per-sport minutes for one Monday-started week of a month view."""

    week_start: date
    week_end: date   # Sunday, inclusive
    minutes_by_sport: dict[SportType, float]
