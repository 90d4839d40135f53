"""
In-memory session store.

Maps opaque bearer tokens to credential bundles for the web analysis flow.
Entries expire after a fixed TTL; expiry is checked on every read, and a
background sweep evicts expired entries so memory stays bounded.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from prdocumentator.config.models import SessionConfig
from prdocumentator.models.session import SessionCredentials, UserSession
from prdocumentator.utils.logging import mask_token

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
DEFAULT_TTL = 3600.0
DEFAULT_CLEANUP_INTERVAL = 600.0

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """Thread-safe token to session map with TTL expiry.

    Safe to share between worker threads and event-loop tasks. Create one
    per process and pass it to whoever needs it.

    Example:
        store = SessionStore()
        token = store.create_session(credentials)
        session = store.get_session(token)
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        cleanup_interval: float = DEFAULT_CLEANUP_INTERVAL,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the store.

        Args:
            ttl: Session lifetime in seconds
            cleanup_interval: Seconds between background sweeps
            clock: Returns the current time; injectable for tests
        """
        self._ttl = timedelta(seconds=ttl)
        self._cleanup_interval = cleanup_interval
        self._clock = clock
        self._sessions: dict[str, UserSession] = {}
        self._lock = threading.Lock()
        self._sweeper: asyncio.Task | None = None

    @classmethod
    def from_config(cls, config: SessionConfig, clock: Clock = utc_now) -> SessionStore:
        return cls(ttl=config.ttl, cleanup_interval=config.cleanup_interval, clock=clock)

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create_session(self, credentials: SessionCredentials) -> str:
        """Store a credential bundle and return its new token.

        Tokens are 64 hex characters from a cryptographic source.
        """
        token = secrets.token_hex(TOKEN_BYTES)
        now = self._clock()
        session = UserSession(
            **credentials.model_dump(include=set(SessionCredentials.model_fields)),
            created_at=now,
            expires_at=now + self._ttl,
        )

        with self._lock:
            self._sessions[token] = session

        logger.info(f"Created session {mask_token(token)} expiring at {session.expires_at.isoformat()}")
        return token

    def get_session(self, token: str) -> UserSession | None:
        """Look up a live session.

        Returns:
            The session, or None when the token is unknown or expired
        """
        with self._lock:
            session = self._sessions.get(token)
        if session is None or session.is_expired(self._clock()):
            return None
        return session

    def invalidate_session(self, token: str) -> bool:
        """Remove a session. Returns whether it existed."""
        with self._lock:
            removed = self._sessions.pop(token, None) is not None
        if removed:
            logger.info(f"Invalidated session {mask_token(token)}")
        return removed

    def sweep(self) -> int:
        """Evict every expired session. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [t for t, s in self._sessions.items() if s.is_expired(now)]
            for token in expired:
                del self._sessions[token]
        if expired:
            logger.info(f"Cleaned up {len(expired)} expired sessions")
        return len(expired)

    async def _sweep_periodically(self) -> None:
        while True:
            await asyncio.sleep(self._cleanup_interval)
            self.sweep()

    def start(self) -> None:
        """Start the background sweep on the running event loop."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.get_running_loop().create_task(self._sweep_periodically())

    async def stop(self) -> None:
        """Cancel the background sweep and wait for it to finish."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
