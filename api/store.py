"""Key-value snapshot storage with a per-key exclusive lock."""

import asyncio
import logging
import secrets
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import AsyncIterator

import redis.asyncio as redis

from config import config
from core.game.errors import TableError

logger = logging.getLogger(__name__)

# Delete the lock only if we still own it
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class LockTimeoutError(TableError):
    """The table lock could not be acquired in time; the caller may retry."""

    code = "lock-timeout"


class KeyValueStore(ABC):
    """Abstract key-value store with an exclusive-lock primitive."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Get a value, None if absent or expired."""
        ...

    @abstractmethod
    async def put(self, key: str, value: bytes, ttl: int | None = None) -> None:
        """Store a value with a time-to-live in seconds."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a value."""
        ...

    @abstractmethod
    async def put_if_absent(self, key: str, value: bytes, ttl: int | None = None) -> bool:
        """Store a value only if the key is free; True when this call wrote it."""
        ...

    @abstractmethod
    async def try_acquire(self, key: str, owner: str, ttl_ms: int) -> bool:
        """Take the lock at key for owner unless somebody else holds it."""
        ...

    @abstractmethod
    async def release(self, key: str, owner: str) -> None:
        """Drop the lock at key if owner still holds it."""
        ...


class InMemoryKeyValueStore(KeyValueStore):
    """In-memory store for local development and tests (single process only)."""

    def __init__(self) -> None:
        self._values: dict[str, tuple[bytes, datetime | None]] = {}
        self._locks: dict[str, tuple[str, datetime]] = {}

    async def get(self, key: str) -> bytes | None:
        """Get a value, None if absent or expired."""
        if key not in self._values:
            return None

        value, expiry = self._values[key]
        if expiry is not None and expiry < datetime.now():
            await self.delete(key)
            return None

        return value

    async def put(self, key: str, value: bytes, ttl: int | None = None) -> None:
        """Store a value with a time-to-live in seconds."""
        ttl = ttl or config.store.session_ttl
        self._values[key] = (value, datetime.now() + timedelta(seconds=ttl))

    async def delete(self, key: str) -> None:
        """Delete a value."""
        self._values.pop(key, None)

    async def put_if_absent(self, key: str, value: bytes, ttl: int | None = None) -> bool:
        """Store a value unless a live one exists; no await between check and write."""
        held = self._values.get(key)
        if held is not None and (held[1] is None or held[1] >= datetime.now()):
            return False
        ttl = ttl or config.store.session_ttl
        self._values[key] = (value, datetime.now() + timedelta(seconds=ttl))
        return True

    async def try_acquire(self, key: str, owner: str, ttl_ms: int) -> bool:
        """Take the lock unless a live holder exists."""
        now = datetime.now()
        held = self._locks.get(key)
        if held is not None and held[1] > now:
            return False
        self._locks[key] = (owner, now + timedelta(milliseconds=ttl_ms))
        return True

    async def release(self, key: str, owner: str) -> None:
        """Drop the lock if owner still holds it."""
        held = self._locks.get(key)
        if held is not None and held[0] == owner:
            del self._locks[key]


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed store; safe to share between worker processes."""

    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client
        self._release = redis_client.register_script(_RELEASE_SCRIPT)

    async def get(self, key: str) -> bytes | None:
        """Get a value, None if absent or expired."""
        return await self._redis.get(key)

    async def put(self, key: str, value: bytes, ttl: int | None = None) -> None:
        """Store a value with a time-to-live in seconds."""
        ttl = ttl or config.store.session_ttl
        await self._redis.setex(key, ttl, value)

    async def delete(self, key: str) -> None:
        """Delete a value."""
        await self._redis.delete(key)

    async def put_if_absent(self, key: str, value: bytes, ttl: int | None = None) -> bool:
        """SET NX EX: the first writer wins."""
        ttl = ttl or config.store.session_ttl
        return bool(await self._redis.set(key, value, nx=True, ex=ttl))

    async def try_acquire(self, key: str, owner: str, ttl_ms: int) -> bool:
        """SET NX PX: only one owner can hold the key until it expires."""
        return bool(await self._redis.set(key, owner, nx=True, px=ttl_ms))

    async def release(self, key: str, owner: str) -> None:
        """Compare-and-delete so an expired lock taken over by another owner survives."""
        await self._release(keys=[key], args=[owner])


@asynccontextmanager
async def table_lock(
    store: KeyValueStore,
    key: str,
    ttl_ms: int | None = None,
    timeout_ms: int | None = None,
) -> AsyncIterator[str]:
    """
    Hold the exclusive lock guarding one table snapshot.

    Polls with exponential backoff until the lock is free or the timeout
    elapses.

    Args:
        store: Store providing the lock primitive
        key: Key of the snapshot being guarded
        ttl_ms: Lock lifetime, so a crashed holder cannot wedge the table
        timeout_ms: Give up after this long

    Yields:
        The owner token of the held lock

    Raises:
        LockTimeoutError: The lock stayed busy past the timeout
    """
    ttl_ms = ttl_ms or config.lock.ttl_ms
    timeout_ms = timeout_ms or config.lock.timeout_ms
    lock_key = f"lock:{key}"
    owner = secrets.token_hex(16)

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000
    backoff_ms = config.lock.initial_backoff_ms

    while not await store.try_acquire(lock_key, owner, ttl_ms):
        remaining = deadline - loop.time()
        if remaining <= 0:
            logger.warning("Timed out waiting for %s after %d ms", lock_key, timeout_ms)
            raise LockTimeoutError(f"Table busy: {key}")
        await asyncio.sleep(min(backoff_ms / 1000, remaining))
        backoff_ms = min(backoff_ms * 2, config.lock.max_backoff_ms)

    try:
        yield owner
    finally:
        await store.release(lock_key, owner)


# Global store instance
_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    """Get or create the configured store."""
    global _store

    if _store is None:
        if config.store.backend == "redis":
            _store = RedisKeyValueStore(redis.from_url(config.redis.url))
        else:
            _store = InMemoryKeyValueStore()
        logger.info("Using %s table store", config.store.backend)

    return _store
