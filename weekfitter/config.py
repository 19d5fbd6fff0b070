"""
WeekFitter — Centralized configuration.

Loads all settings from .env and validates them.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

# Load .env from project root (one level up from weekfitter/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

# Lead times (minutes) a reminder may be set to
ALLOWED_NOTIFICATION_MINUTES: tuple[int, ...] = (5, 15, 30, 60, 120, 1440, 2880, 10080)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Backend REST API
    API_URL: str = "http://localhost:8080"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # Default owner key for the CLI (user e-mail)
    OWNER_EMAIL: str = ""

    LOG_LEVEL: str = "INFO"

    # Reminders pre-selected on a new event
    DEFAULT_NOTIFICATIONS: list[int] = [60]

    @field_validator("API_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return str(v).rstrip("/")

    @field_validator("DEFAULT_NOTIFICATIONS", mode="before")
    @classmethod
    def parse_notifications(cls, v: str | list[int]) -> list[int]:
        if isinstance(v, str):
            v = [int(part.strip()) for part in v.split(",") if part.strip()]
        illegal = [m for m in v if m not in ALLOWED_NOTIFICATION_MINUTES]
        if illegal:
            raise ValueError(f"Unsupported notification lead times: {illegal}")
        return sorted(set(v))

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return level


def _load_settings() -> Settings:
    """Load settings from environment, exiting on invalid values."""
    try:
        return Settings(
            API_URL=os.getenv("API_URL", "http://localhost:8080"),
            REQUEST_TIMEOUT_SECONDS=os.getenv("REQUEST_TIMEOUT_SECONDS", "10"),
            OWNER_EMAIL=os.getenv("OWNER_EMAIL", ""),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
            DEFAULT_NOTIFICATIONS=os.getenv("DEFAULT_NOTIFICATIONS", "60"),
        )
    except ValidationError as exc:
        print(f"ERROR: invalid configuration in .env:\n{exc}", file=sys.stderr)
        sys.exit(1)


# Singleton, imported by all other modules as:
#   from weekfitter.config import settings
settings = _load_settings()
