"""
Session Store

Server-side session state keyed by an opaque cookie token.

Two backends share one interface:
- RedisSessionStore: used when REDIS_URL is configured, expiry via key TTL
- MemorySessionStore: process-local fallback for development and tests

The store instance lives on ``app.state.sessions`` and is passed to handlers
through the ``get_session_store`` dependency.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import asdict, dataclass

from fastapi import Request
from redis.asyncio import Redis

from admit_portal.core.security import generate_session_token, hash_session_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionData:
    """The authenticated principal stored in a session."""

    user_id: str
    email: str


class SessionStore(ABC):
    """Interface for session backends."""

    def __init__(self, secret_key: str, ttl_seconds: int):
        self.secret_key = secret_key
        self.ttl_seconds = ttl_seconds

    def _key(self, token: str) -> str:
        return hash_session_token(token, self.secret_key)

    async def create(self, data: SessionData) -> str:
        """Create a session and return the token to put in the cookie."""
        token = generate_session_token()
        await self._save(self._key(token), data)
        return token

    async def get(self, token: str | None) -> SessionData | None:
        """Return session data for a token, or None if absent or expired."""
        if not token:
            return None
        return await self._load(self._key(token))

    async def destroy(self, token: str | None) -> None:
        if not token:
            return
        await self._delete(self._key(token))

    @abstractmethod
    async def _save(self, key: str, data: SessionData) -> None: ...

    @abstractmethod
    async def _load(self, key: str) -> SessionData | None: ...

    @abstractmethod
    async def _delete(self, key: str) -> None: ...


class MemorySessionStore(SessionStore):
    """
    In-memory session store.

    Note: sessions are lost on restart and are not shared across
    server processes.
    """

    def __init__(
        self,
        secret_key: str,
        ttl_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(secret_key, ttl_seconds)
        self._clock = clock
        self._sessions: dict[str, tuple[SessionData, float]] = {}

    async def _save(self, key: str, data: SessionData) -> None:
        now = self._clock()
        # Drop expired sessions that were never read again
        expired = [k for k, (_, expires_at) in self._sessions.items() if now >= expires_at]
        for k in expired:
            del self._sessions[k]
        self._sessions[key] = (data, now + self.ttl_seconds)

    async def _load(self, key: str) -> SessionData | None:
        entry = self._sessions.get(key)
        if entry is None:
            return None
        data, expires_at = entry
        if self._clock() >= expires_at:
            self._sessions.pop(key, None)
            return None
        return data

    async def _delete(self, key: str) -> None:
        self._sessions.pop(key, None)


class RedisSessionStore(SessionStore):
    """Redis-backed session store. Expiry is handled by the key TTL."""

    KEY_PREFIX = "session:"

    def __init__(self, client: Redis, secret_key: str, ttl_seconds: int):
        super().__init__(secret_key, ttl_seconds)
        self.client = client

    async def _save(self, key: str, data: SessionData) -> None:
        await self.client.set(
            f"{self.KEY_PREFIX}{key}",
            json.dumps(asdict(data)),
            ex=self.ttl_seconds,
        )

    async def _load(self, key: str) -> SessionData | None:
        raw = await self.client.get(f"{self.KEY_PREFIX}{key}")
        if raw is None:
            return None
        try:
            payload = json.loads(raw)
            return SessionData(user_id=payload["user_id"], email=payload["email"])
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding malformed session payload")
            await self._delete(key)
            return None

    async def _delete(self, key: str) -> None:
        await self.client.delete(f"{self.KEY_PREFIX}{key}")


def get_session_store(request: Request) -> SessionStore:
    """FastAPI dependency returning the application's session store."""
    return request.app.state.sessions


__all__ = [
    "SessionData",
    "SessionStore",
    "MemorySessionStore",
    "RedisSessionStore",
    "get_session_store",
]
