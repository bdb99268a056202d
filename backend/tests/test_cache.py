"""
Tests for the read-through cache: hits, misses, invalidation and degraded Redis.
"""

from typing import Optional

import pytest
from pydantic import BaseModel, TypeAdapter
from redis.exceptions import ConnectionError as RedisConnectionError

from sports_events.services.cache_service import CachePartition, ReadThroughCache


class Item(BaseModel):
    id: int
    name: str


_one = TypeAdapter(Optional[Item])


class CountingLoader:
    def __init__(self, value):
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return self.value


class UnreachableRedis:
    """Every command fails the way a dropped connection does."""

    async def get(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")

    set = incr = delete = info = get

    async def scan_iter(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")
        yield


@pytest.mark.asyncio
async def test_second_read_is_served_from_cache(cache):
    loader = CountingLoader(Item(id=1, name="Running"))

    first = await cache.get_or_load(CachePartition.CATEGORIES, "category-by-id", (1,), _one, loader)
    second = await cache.get_or_load(CachePartition.CATEGORIES, "category-by-id", (1,), _one, loader)

    assert first == second == Item(id=1, name="Running")
    assert loader.calls == 1


@pytest.mark.asyncio
async def test_missing_entity_is_cached(cache):
    loader = CountingLoader(None)

    assert await cache.get_or_load(CachePartition.VENUES, "venue-by-id", (9,), _one, loader) is None
    assert await cache.get_or_load(CachePartition.VENUES, "venue-by-id", (9,), _one, loader) is None
    assert loader.calls == 1


@pytest.mark.asyncio
async def test_arguments_are_part_of_the_key(cache):
    loader = CountingLoader(Item(id=1, name="Running"))

    await cache.get_or_load(CachePartition.CATEGORIES, "category-by-id", (1,), _one, loader)
    await cache.get_or_load(CachePartition.CATEGORIES, "category-by-id", (2,), _one, loader)
    assert loader.calls == 2


@pytest.mark.asyncio
async def test_invalidate_clears_partition(cache, fake_redis):
    loader = CountingLoader(Item(id=1, name="Running"))
    await cache.get_or_load(CachePartition.CATEGORIES, "category-by-id", (1,), _one, loader)

    await cache.invalidate(CachePartition.CATEGORIES)

    await cache.get_or_load(CachePartition.CATEGORIES, "category-by-id", (1,), _one, loader)
    assert loader.calls == 2

    keys = [key async for key in fake_redis.scan_iter(match="test:categories:*")]
    assert keys == ["test:categories:g1:category-by-id:1"]


@pytest.mark.asyncio
async def test_invalidate_leaves_other_partition(cache):
    venues = CountingLoader([])
    categories = CountingLoader([])
    many = TypeAdapter(list[Item])

    await cache.get_or_load(CachePartition.VENUES, "all-venues", (), many, venues)
    await cache.get_or_load(CachePartition.CATEGORIES, "all-categories", (), many, categories)

    await cache.invalidate(CachePartition.VENUES)

    await cache.get_or_load(CachePartition.VENUES, "all-venues", (), many, venues)
    await cache.get_or_load(CachePartition.CATEGORIES, "all-categories", (), many, categories)
    assert venues.calls == 2
    assert categories.calls == 1


@pytest.mark.asyncio
async def test_disabled_cache_passes_through():
    cache = ReadThroughCache(None, namespace="test")
    loader = CountingLoader(Item(id=3, name="Cycling"))

    await cache.get_or_load(CachePartition.CATEGORIES, "category-by-id", (3,), _one, loader)
    await cache.get_or_load(CachePartition.CATEGORIES, "category-by-id", (3,), _one, loader)
    await cache.invalidate(CachePartition.CATEGORIES)

    assert loader.calls == 2
    assert await cache.stats() == {"status": "disabled"}


@pytest.mark.asyncio
async def test_redis_errors_fall_back_to_loader():
    cache = ReadThroughCache(UnreachableRedis(), namespace="test")
    loader = CountingLoader(Item(id=4, name="Swimming"))

    value = await cache.get_or_load(CachePartition.CATEGORIES, "category-by-id", (4,), _one, loader)
    await cache.invalidate(CachePartition.CATEGORIES)

    assert value == Item(id=4, name="Swimming")
    assert loader.calls == 1
    assert (await cache.stats())["status"] == "error"
