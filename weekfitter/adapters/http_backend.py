"""REST backend adapter — implements EventBackend over HTTP with httpx.

All requests are scoped by the owner e-mail passed as the ``email`` query
parameter; the event id, where needed, is a path segment. Non-2xx
responses carry a plain-text error body which becomes the BackendError
message.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from weekfitter.config import settings
from weekfitter.ports.event_port import BackendError

logger = logging.getLogger(__name__)

_EVENTS_PATH = "/api/events"
_UPLOAD_PATH = "/api/files/upload"


class HttpEventBackend:
    """httpx implementation of EventBackend."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        self._base_url = (base_url or settings.API_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(method, url, **kwargs)
                resp.raise_for_status()
                return resp
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            body = exc.response.text.strip()
            logger.error("%s %s rejected (%d): %s", method, path, status, body)
            raise BackendError(body or f"HTTP {status}", status_code=status) from exc
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise BackendError(f"Backend unreachable: {exc}") from exc

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise BackendError(f"Malformed JSON from backend: {resp.text[:200]!r}") from exc

    @classmethod
    def _object(cls, resp: httpx.Response) -> dict:
        """Decode a single-event body; an empty or non-object body yields {}."""
        if not resp.content:
            return {}
        data = cls._json(resp)
        return data if isinstance(data, dict) else {}

    async def list_events(self, owner_key: str) -> Any:
        resp = await self._request("GET", _EVENTS_PATH, params={"email": owner_key})
        return self._json(resp)

    async def create_event(self, owner_key: str, payload: dict) -> dict:
        resp = await self._request(
            "POST", _EVENTS_PATH, params={"email": owner_key}, json=payload,
        )
        data = self._object(resp)
        logger.info("Event created: '%s' (id=%s)", payload.get("title"), data.get("id"))
        return data

    async def update_event(self, owner_key: str, event_id: str, payload: dict) -> dict:
        resp = await self._request(
            "PUT", f"{_EVENTS_PATH}/{event_id}", params={"email": owner_key}, json=payload,
        )
        logger.info("Event updated: id=%s", event_id)
        return self._object(resp)

    async def delete_event(self, event_id: str) -> None:
        await self._request("DELETE", f"{_EVENTS_PATH}/{event_id}")
        logger.info("Event deleted: id=%s", event_id)

    async def upload_file(self, filename: str, content: bytes) -> str:
        """Upload an attachment; returns the stored path from the plain-text body."""
        resp = await self._request(
            "POST", _UPLOAD_PATH, files={"file": (filename, content)},
        )
        stored = resp.text.strip()
        logger.info("File '%s' uploaded to %s", filename, stored)
        return stored
