"""
Redis read-through cache for category and venue lookups.

CACHING STRATEGY
================

What we cache:
  - Category and venue reads (single entities, lists, paginated results),
    serialized as JSON through the response schemas' TypeAdapters
  - Key pattern: "{namespace}:{partition}:g{generation}:{operation}:{args}"
    e.g. "sports-events:venues:g3:venues-by-city:Bangalore"

Why only these two:
  - Categories and venues change rarely relative to how often they are read
  - Event and booking reads carry live participant counts; a cached copy would
    keep showing a full event as bookable

Invalidation strategy:
  - Any write to a partition clears the whole partition
  - Event writes clear both partitions ("with events" lookups depend on events)
  - No TTL: the only way out of the cache is invalidation

  Each partition has a generation counter that is part of every key. Invalidation
  INCRs it atomically, so a reader that was repopulating concurrently writes under
  the old generation and that entry is never read again. Old-generation keys are
  then removed with SCAN.

Redis is optional: when it is disabled or unreachable every read goes straight to
the loader, and Redis errors are logged without failing the request.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TypeVar

import redis.asyncio as redis
from pydantic import TypeAdapter
from redis.exceptions import RedisError

from sports_events.core.config import Settings
from sports_events.core.logging import get_logger
from sports_events.core.metrics import record_cache_operation, record_cache_invalidation

logger = get_logger(__name__)

T = TypeVar("T")

_REDIS_ERRORS = (RedisError, OSError)


class CachePartition(str, Enum):
    CATEGORIES = "categories"
    VENUES = "venues"


async def connect_redis(settings: Settings) -> Optional[redis.Redis]:
    """Create a Redis client. Returns None if Redis is disabled or unreachable."""
    if not settings.REDIS_ENABLED:
        return None

    client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
    )
    try:
        await client.ping()
    except _REDIS_ERRORS as e:
        logger.error("redis_connection_failed", error=str(e))
        await client.aclose()
        return None

    logger.info("redis_connected", url=settings.REDIS_URL)
    return client


class ReadThroughCache:
    def __init__(self, client: Optional[redis.Redis], namespace: str = "sports-events") -> None:
        self.client = client
        self.namespace = namespace

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def _generation_key(self, partition: CachePartition) -> str:
        return f"{self.namespace}:generation:{partition.value}"

    def _partition_prefix(self, partition: CachePartition) -> str:
        return f"{self.namespace}:{partition.value}:"

    def make_key(self, partition: CachePartition, generation: int, operation: str, args: tuple) -> str:
        parts = [f"{self.namespace}:{partition.value}:g{generation}:{operation}"]
        parts.extend(str(arg) for arg in args)
        return ":".join(parts)

    async def _generation(self, partition: CachePartition) -> int:
        value = await self.client.get(self._generation_key(partition))
        return int(value) if value is not None else 0

    async def get_or_load(
        self,
        partition: CachePartition,
        operation: str,
        args: tuple,
        adapter: TypeAdapter,
        loader: Callable[[], Awaitable[T]],
    ) -> T:
        """
        Return the cached value for (operation, args), calling `loader` on a miss.
        A cached JSON null is a hit, so "not found" lookups are cached too.
        """
        if not self.enabled:
            record_cache_operation(partition.value, "bypass")
            return await loader()

        key = None
        try:
            generation = await self._generation(partition)
            key = self.make_key(partition, generation, operation, args)
            data = await self.client.get(key)
            if data is not None:
                record_cache_operation(partition.value, "hit")
                logger.debug("cache_hit", key=key)
                return adapter.validate_json(data)
        except _REDIS_ERRORS as e:
            logger.error("cache_get_error", partition=partition.value, operation=operation, error=str(e))
            record_cache_operation(partition.value, "bypass")
            return await loader()

        record_cache_operation(partition.value, "miss")
        logger.debug("cache_miss", key=key)
        value = await loader()

        try:
            await self.client.set(key, adapter.dump_json(value).decode())
        except _REDIS_ERRORS as e:
            logger.error("cache_set_error", key=key, error=str(e))

        return value

    async def invalidate(self, *partitions: CachePartition) -> None:
        """Bump each partition's generation, then delete its old-generation keys."""
        if not self.enabled:
            return

        for partition in partitions:
            try:
                generation = await self.client.incr(self._generation_key(partition))
                record_cache_invalidation(partition.value)

                current = f"{self._partition_prefix(partition)}g{generation}:"
                deleted = 0
                async for key in self.client.scan_iter(match=f"{self._partition_prefix(partition)}*", count=100):
                    if not key.startswith(current):
                        await self.client.delete(key)
                        deleted += 1
                logger.info("cache_invalidated", partition=partition.value, generation=generation, keys_deleted=deleted)
            except _REDIS_ERRORS as e:
                logger.error("cache_invalidation_error", partition=partition.value, error=str(e))

    async def stats(self) -> dict[str, Any]:
        """Redis keyspace statistics for the health endpoint."""
        if not self.enabled:
            return {"status": "disabled"}

        try:
            info = await self.client.info("stats")
            hits = info.get("keyspace_hits", 0)
            misses = info.get("keyspace_misses", 0)
            return {
                "status": "connected",
                "hits": hits,
                "misses": misses,
                "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
            }
        except _REDIS_ERRORS as e:
            return {"status": "error", "error": str(e)}
