"""Cache stores for serialized weather data."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol

import structlog
from cachetools import TLRUCache
from prometheus_client import Gauge
from redis.asyncio import Redis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import RedisError

from tiered_weather.config import Settings
from tiered_weather.exceptions import CacheUnavailable

logger = structlog.get_logger()

cache_size_gauge = Gauge("cache_size", "Current number of in-memory cache entries")


class CacheStore(Protocol):
    """Key/value store with per-entry expiry enforced by the store."""

    async def get(self, key: str) -> bytes | None:
        """Return the stored value, or None if absent or expired."""
        ...

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Store value, replacing any previous entry, expiring after ttl_seconds."""
        ...

    async def ping(self) -> bool:
        """Check if the store is reachable."""
        ...

    async def close(self) -> None:
        """Release store resources."""
        ...


def _entry_expiry(_key: str, value: tuple[bytes, int], now: float) -> float:
    return now + value[1]


class MemoryCacheStore:
    """In-process store with per-entry TTL."""

    def __init__(
        self,
        max_size: int,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize store with capacity and clock."""
        self._cache: TLRUCache[str, tuple[bytes, int]] = TLRUCache(
            maxsize=max_size,
            ttu=_entry_expiry,
            timer=timer,
        )

    async def get(self, key: str) -> bytes | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        return entry[0]

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        self._cache[key] = (value, ttl_seconds)
        cache_size_gauge.set(len(self._cache))

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self.clear()

    def clear(self) -> None:
        """Clear all cache entries."""
        self._cache.clear()
        cache_size_gauge.set(0)

    @property
    def size(self) -> int:
        """Return current number of live entries."""
        self._cache.expire()
        return len(self._cache)


class RedisCacheStore:
    """Store backed by a shared Redis server."""

    def __init__(self, client: Redis) -> None:
        """Initialize store with a Redis client."""
        self._client = client

    @classmethod
    def from_url(cls, url: str, timeout: float) -> RedisCacheStore:
        """Create store connected to the given Redis URL.

        Connecting and waiting for a reply are both bounded by timeout.
        Failed commands are not retried.
        """
        return cls(
            Redis.from_url(
                url,
                socket_timeout=timeout,
                socket_connect_timeout=timeout,
                retry=Retry(NoBackoff(), 0),
            )
        )

    async def get(self, key: str) -> bytes | None:
        try:
            return await self._client.get(key)
        except RedisError as e:
            raise CacheUnavailable(f"Redis GET failed: {e}") from e

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise CacheUnavailable(f"Redis SET failed: {e}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning("Redis ping failed", error=str(e))
            return False

    async def close(self) -> None:
        await self._client.aclose()


def build_cache_store(settings: Settings) -> CacheStore:
    """Create the cache store selected by settings."""
    if settings.cache_backend == "redis":
        return RedisCacheStore.from_url(settings.redis_url, settings.cache_timeout_seconds)
    return MemoryCacheStore(settings.cache_max_size)
