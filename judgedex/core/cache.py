"""Response cache for upstream CourtListener calls.

Cache key
    ``{endpoint}?{k1=v1&k2=v2...}`` with parameters sorted by name, ``None``
    values dropped and booleans rendered ``true``/``false``, so the same
    logical query always lands on the same slot.

TTL
    300 s, fixed and process-wide.  An entry is valid only while
    ``now - timestamp < TTL``; an expired entry reads exactly like a missing
    one and is overwritten by the next write.

Backends
    ``InMemoryResponseCache``  process-local, LRU-bounded.  Each worker
                               process cold-starts its own copy.
    ``RedisResponseCache``     shared across workers.  Redis errors are
                               logged and read as misses; the cache never
                               raises into a request.

No locking: writes are idempotent overwrites of a slot (last write wins) and
a stale read is bounded by the TTL.
"""
from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 300

_KEY_PREFIX = "judgedex:v1"


@dataclass
class CacheEntry:
    key: str
    payload: Any
    timestamp: float

    def is_fresh(self, now: float, ttl: float = CACHE_TTL_SECONDS) -> bool:
        return now - self.timestamp < ttl


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ResponseCache(ABC):
    """Async get/set interface the CourtListener client is written against."""

    ttl: int = CACHE_TTL_SECONDS

    @staticmethod
    def make_key(endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
        items = sorted((k, v) for k, v in (params or {}).items() if v is not None)
        query = "&".join(f"{k}={_render(v)}" for k, v in items)
        return f"{endpoint}?{query}"

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the cached payload, or None on miss / expiry."""

    @abstractmethod
    async def set(self, key: str, payload: Any) -> None:
        """Store ``payload`` under ``key`` for ``ttl`` seconds."""

    @abstractmethod
    async def clear(self) -> None:
        """Drop every entry."""


class InMemoryResponseCache(ResponseCache):
    def __init__(self, max_entries: int = 1024, clock: Callable[[], float] = time.monotonic):
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock(), self.ttl):
            self._entries.pop(key, None)
            return None
        self._entries.move_to_end(key)
        return entry.payload

    async def set(self, key: str, payload: Any) -> None:
        self._entries[key] = CacheEntry(key=key, payload=payload, timestamp=self._clock())
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    async def clear(self) -> None:
        self._entries.clear()


class RedisResponseCache(ResponseCache):
    def __init__(self, url: str, client: Any = None):
        self.url = url
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            import redis.asyncio as aioredis

            self._client = aioredis.from_url(
                self.url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self._get_client().get(f"{_KEY_PREFIX}:{key}")
            return json.loads(raw) if raw is not None else None
        except Exception as exc:
            logger.warning("cache.get: Redis error (%s), treating as miss", exc)
            return None

    async def set(self, key: str, payload: Any) -> None:
        try:
            await self._get_client().setex(f"{_KEY_PREFIX}:{key}", self.ttl, json.dumps(payload))
        except Exception as exc:
            logger.warning("cache.set: Redis error (%s), response not cached", exc)

    async def clear(self) -> None:
        try:
            client = self._get_client()
            keys = [k async for k in client.scan_iter(match=f"{_KEY_PREFIX}:*")]
            if keys:
                await client.delete(*keys)
        except Exception as exc:
            logger.warning("cache.clear: Redis error (%s)", exc)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()


def build_response_cache(settings) -> ResponseCache:
    if settings.CACHE_BACKEND == "redis":
        if not settings.REDIS_URL:
            logger.warning("cache: REDIS_URL not set, using in-memory cache")
        else:
            return RedisResponseCache(settings.REDIS_URL)
    return InMemoryResponseCache(max_entries=settings.CACHE_MAX_ENTRIES)
