"""In-memory register of pending browser logins."""

import logging
import secrets
import time
from typing import Callable

from lcmcp.models import AUTH_SESSION_TTL_SECONDS, AuthSession

logger = logging.getLogger(__name__)


class AuthSessionRegister:
    """Maps auth session ids to pending logins for the life of the process.

    Expired sessions are treated as absent on lookup; physical removal is lazy.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        ttl: float = AUTH_SESSION_TTL_SECONDS,
    ) -> None:
        self._clock = clock
        self._ttl = ttl
        self._sessions: dict[str, AuthSession] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def create(self) -> str:
        """Start a new auth session and return its id."""
        self.purge_expired()
        session_id = secrets.token_urlsafe(24)
        self._sessions[session_id] = AuthSession(
            session_id=session_id,
            created_at=self._clock(),
            ttl=self._ttl,
        )
        logger.debug("Created auth session (%d pending)", len(self._sessions))
        return session_id

    def get(self, session_id: str) -> AuthSession | None:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if session.is_expired(self._clock()):
            del self._sessions[session_id]
            return None
        return session

    def clear(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        """Drop expired sessions. Returns how many were removed."""
        now = self._clock()
        expired = [sid for sid, s in self._sessions.items() if s.is_expired(now)]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
