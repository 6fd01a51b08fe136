"""Signed session tokens and snapshot storage (Redis, or memory when Redis is down)."""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, NamedTuple
from uuid import uuid4

import redis.asyncio as redis
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from redis.exceptions import RedisError

from config import config

logger = logging.getLogger(__name__)


class SessionSigner:
    """Turns raw session ids into tamper-proof, expiring tokens."""

    def __init__(self, secret_key: str | None = None, max_age: int | None = None) -> None:
        """
        Initialize the signer.

        Args:
            secret_key: Signing key; the configured key when None
            max_age: Token lifetime in seconds; the session TTL when None
        """
        self._serializer = URLSafeTimedSerializer(
            secret_key or config.security.secret_key, salt="hilo-session"
        )
        self._max_age = max_age or config.session_ttl

    def sign(self, session_id: str) -> str:
        """Wrap a session id in a signed token."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """Return the session id inside ``token``, or None if forged or expired."""
        try:
            return self._serializer.loads(token, max_age=max_age or self._max_age)
        except (BadSignature, SignatureExpired):
            return None


_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the module signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


def extract_session_id(token: str) -> str | None:
    """Verify a token with the module signer."""
    return get_session_signer().unsign(token)


class SessionStore(ABC):
    """
    Where training sessions live between requests.

    Each signed token maps to one entry (the controller snapshot plus
    activity timestamps) that expires after the session TTL. Completed
    session records go to a separate history list, capped at a limit and
    kept oldest first.
    """

    @abstractmethod
    async def load(self, token: str) -> dict[str, Any] | None:
        """Get the entry for a token, or None if missing or expired."""

    @abstractmethod
    async def save(self, token: str, entry: dict[str, Any], ttl: int | None = None) -> None:
        """Store an entry, restarting its TTL."""

    @abstractmethod
    async def discard(self, token: str) -> None:
        """Drop an entry; unknown tokens are ignored."""

    @abstractmethod
    async def append_history(self, record: dict[str, Any], limit: int) -> None:
        """Append a session record, keeping only the newest ``limit``."""

    @abstractmethod
    async def get_history(self) -> list[dict[str, Any]]:
        """Get stored session records, oldest first."""

    @abstractmethod
    async def clear_history(self) -> None:
        """Remove every stored session record."""

    async def exists(self, token: str) -> bool:
        """Check whether a live entry is stored for the token."""
        return await self.load(token) is not None

    def new_token(self) -> str:
        """Create a signed token around a fresh UUID."""
        return get_session_signer().sign(str(uuid4()))


class _Entry(NamedTuple):
    data: dict[str, Any]
    expires_at: float  # time.monotonic() seconds


class InMemorySessionStore(SessionStore):
    """Process-local store for development and tests."""

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self._history: list[dict[str, Any]] = []

    async def load(self, token: str) -> dict[str, Any] | None:
        entry = self._entries.get(token)
        if entry is None:
            return None
        if entry.expires_at <= time.monotonic():
            del self._entries[token]
            return None
        return entry.data

    async def save(self, token: str, entry: dict[str, Any], ttl: int | None = None) -> None:
        expires_at = time.monotonic() + (ttl or config.session_ttl)
        self._entries[token] = _Entry(entry, expires_at)

    async def discard(self, token: str) -> None:
        self._entries.pop(token, None)

    async def append_history(self, record: dict[str, Any], limit: int) -> None:
        self._history = (self._history + [record])[-limit:]

    async def get_history(self) -> list[dict[str, Any]]:
        return list(self._history)

    async def clear_history(self) -> None:
        self._history = []

    def purge_expired(self) -> int:
        """Drop expired entries and return how many went."""
        now = time.monotonic()
        expired = [token for token, entry in self._entries.items() if entry.expires_at <= now]
        for token in expired:
            del self._entries[token]
        return len(expired)


class RedisSessionStore(SessionStore):
    """Redis-backed store; entries are JSON strings with a Redis TTL."""

    SESSION_PREFIX = "hilo:session:"
    HISTORY_KEY = "hilo:history"

    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client

    async def load(self, token: str) -> dict[str, Any] | None:
        raw = await self._redis.get(self.SESSION_PREFIX + token)
        return json.loads(raw) if raw is not None else None

    async def save(self, token: str, entry: dict[str, Any], ttl: int | None = None) -> None:
        await self._redis.setex(
            self.SESSION_PREFIX + token, ttl or config.session_ttl, json.dumps(entry)
        )

    async def discard(self, token: str) -> None:
        await self._redis.delete(self.SESSION_PREFIX + token)

    async def append_history(self, record: dict[str, Any], limit: int) -> None:
        await self._redis.rpush(self.HISTORY_KEY, json.dumps(record))
        await self._redis.ltrim(self.HISTORY_KEY, -limit, -1)

    async def get_history(self) -> list[dict[str, Any]]:
        return [json.loads(item) for item in await self._redis.lrange(self.HISTORY_KEY, 0, -1)]

    async def clear_history(self) -> None:
        await self._redis.delete(self.HISTORY_KEY)


_session_store: SessionStore | None = None


async def get_session_store() -> SessionStore:
    """
    Get the process-wide store, connecting on first use.

    Redis is tried when enabled; if it does not answer a ping the in-memory
    store is used instead and a warning is logged.
    """
    global _session_store
    if _session_store is not None:
        return _session_store

    if config.redis.enabled:
        client = redis.from_url(config.redis.url)
        try:
            await client.ping()
        except (RedisError, OSError) as exc:
            logger.warning("Redis unavailable at %s (%s), using in-memory store", config.redis.url, exc)
            await client.aclose()
        else:
            logger.info("Using Redis session store at %s", config.redis.url)
            _session_store = RedisSessionStore(client)
            return _session_store
    else:
        logger.info("Redis disabled, using in-memory store")

    _session_store = InMemorySessionStore()
    return _session_store


def set_session_store(store: SessionStore | None) -> None:
    """Replace the process-wide store; None makes the next call reconnect."""
    global _session_store
    _session_store = store
