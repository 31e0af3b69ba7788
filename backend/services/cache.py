"""Key-value cache with per-key expiry for the three analytics documents.

Two backends share the same async interface:

- TTLCache: in-process dict, the default. Each uvicorn worker holds its own
  copy, so with several workers every worker must be refreshed separately
  (the scheduler runs in each of them).
- RedisCache: used when REDIS_URL is set; all workers share one store and
  expiry is delegated to Redis (SET ... EX).

Values are JSON text. read_json/write_json are the only way the rest of the
service touches cached documents.
"""

import asyncio
import copy
import json
import logging
import time
from typing import Any, Callable

import redis.asyncio as redis

logger = logging.getLogger(__name__)

USERS_KEY = "users"
POSTS_KEY = "posts"
COMMENTS_KEY = "comments"


class TTLCache:
    """Async-compatible in-memory cache with TTL support."""

    name = "memory"

    def __init__(self, clock: Callable[[], float] = time.time):
        self._store: dict[str, tuple[float, str]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    async def get(self, key: str) -> str | None:
        async with self._lock:
            if key in self._store:
                expires_at, value = self._store[key]
                if self._clock() < expires_at:
                    return value
                del self._store[key]
            return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        async with self._lock:
            self._store[key] = (self._clock() + ttl_seconds, value)
        return True

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._store.pop(key, None)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        async with self._lock:
            self._store.clear()


class RedisCache:
    """Redis-backed cache. Errors are logged and reported as misses/failed writes."""

    name = "redis"

    def __init__(self, redis_url: str, client: redis.Redis | None = None):
        self.redis_url = redis_url
        self._redis = client or redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30,
        )

    async def get(self, key: str) -> str | None:
        try:
            return await self._redis.get(key)
        except redis.RedisError as e:
            logger.error("Redis GET %s failed: %s", key, e)
            return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        try:
            await self._redis.set(key, value, ex=ttl_seconds)
            return True
        except redis.RedisError as e:
            logger.error("Redis SET %s failed: %s", key, e)
            return False

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except redis.RedisError as e:
            logger.error("Redis DEL %s failed: %s", key, e)

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except redis.RedisError as e:
            logger.warning("Redis ping failed: %s", e)
            return False

    async def close(self) -> None:
        await self._redis.aclose()


CacheStore = TTLCache | RedisCache


def create_cache(redis_url: str | None) -> CacheStore:
    """Pick the cache backend from configuration."""
    if redis_url:
        logger.info("Using Redis cache at %s", redis_url)
        return RedisCache(redis_url)
    logger.info("Using in-memory cache")
    return TTLCache()


async def read_json(cache: CacheStore, key: str, default: dict | list) -> Any:
    """Load a cached JSON document.

    A missing key, text that is not valid JSON, or a document of a different
    shape than ``default`` (object vs array) all yield a copy of ``default``.
    """
    raw = await cache.get(key)
    if raw is None:
        return copy.copy(default)
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning("Cached %s is not valid JSON, treating as empty: %s", key, e)
        return copy.copy(default)
    if not isinstance(value, type(default)):
        logger.warning("Cached %s has unexpected type %s, treating as empty", key, type(value).__name__)
        return copy.copy(default)
    return value


async def write_json(cache: CacheStore, key: str, value: dict | list, ttl_seconds: int) -> bool:
    """Replace a cached document; returns False if the store rejected the write."""
    return await cache.set(key, json.dumps(value), ttl_seconds)
