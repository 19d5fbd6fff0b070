"""Signed-in user session.

Created at sign-in and closed at sign-out. EventStore and SyncEngine receive
the session at construction and read the owner key from it on every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class SessionClosedError(Exception):
    """Raised when a closed session is used to reach the backend."""


@dataclass
class Session:
    owner_key: str
    active: bool = True

    @classmethod
    def sign_in(cls, email: str) -> "Session":
        email = email.strip()
        if not email:
            raise ValueError("Owner e-mail must not be empty")
        logger.info("Session opened for %s", email)
        return cls(owner_key=email)

    def require_owner(self) -> str:
        """Return the owner key, or raise if the user has signed out."""
        if not self.active:
            raise SessionClosedError(f"Session for {self.owner_key} is closed")
        return self.owner_key

    def close(self) -> None:
        if self.active:
            logger.info("Session closed for %s", self.owner_key)
        self.active = False
