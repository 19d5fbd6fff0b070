"""Event backend port — abstract interface for the remote event service.

Core modules depend on this protocol, never on a specific transport.
"""

from __future__ import annotations

from typing import Any, Protocol


class BackendError(Exception):
    """Raised when any backend operation fails.

    Transport failures and rejected requests (non-2xx) are both reported
    through this one type; ``status_code`` is None for transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EventBackend(Protocol):
    """Abstract event service used by core modules."""

    async def list_events(self, owner_key: str) -> Any: ...

    async def create_event(self, owner_key: str, payload: dict) -> dict: ...

    async def update_event(self, owner_key: str, event_id: str, payload: dict) -> dict: ...

    async def delete_event(self, event_id: str) -> None: ...

    async def upload_file(self, filename: str, content: bytes) -> str: ...
