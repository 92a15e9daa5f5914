import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from daily_dispatch.core.cache import CacheStore, InMemoryCacheStore
from daily_dispatch.services.cache_service import CLEANUP_HISTORY_KEY, CacheService


@pytest.fixture
def failing_store():
    store = MagicMock(spec=CacheStore)
    store.get = AsyncMock(side_effect=ConnectionError("connection refused"))
    store.set_with_ttl = AsyncMock(side_effect=ConnectionError("connection refused"))
    store.keys_matching = AsyncMock(side_effect=ConnectionError("connection refused"))
    store.list_append = AsyncMock(side_effect=ConnectionError("connection refused"))
    store.list_range = AsyncMock(side_effect=ConnectionError("connection refused"))
    store.close = AsyncMock()
    return store


class TestCacheService:
    @pytest.mark.asyncio
    async def test_operations_fail_when_not_connected(self, memory_store):
        service = CacheService(memory_store)

        result = await service.get("k")

        assert not result.success
        assert result.error == "cache not connected"

    @pytest.mark.asyncio
    async def test_set_then_get(self, cache_service):
        assert (await cache_service.set("k", 60, "v")).success

        result = await cache_service.get("k")

        assert result.success
        assert result.value == "v"

    @pytest.mark.asyncio
    async def test_store_errors_become_failed_results(self, failing_store):
        service = CacheService(failing_store)
        await service.connect()

        result = await service.get("k")

        assert not result.success
        assert "connection refused" in result.error

    @pytest.mark.asyncio
    async def test_get_or_set_uses_cached_value(self, cache_service):
        await cache_service.set("dispatch:summary:ai", 60, json.dumps("cached summary"))
        fetch_fn = AsyncMock(return_value="fresh summary")

        value = await cache_service.get_or_set("dispatch:summary:ai", 60, fetch_fn)

        assert value == "cached summary"
        fetch_fn.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_or_set_populates_on_miss(self, cache_service):
        fetch_fn = AsyncMock(return_value={"headline": "x"})

        value = await cache_service.get_or_set("k", 60, fetch_fn)

        assert value == {"headline": "x"}
        assert json.loads((await cache_service.get("k")).value) == {"headline": "x"}

    @pytest.mark.asyncio
    async def test_get_or_set_falls_through_when_cache_down(self, failing_store):
        service = CacheService(failing_store)
        await service.connect()
        fetch_fn = AsyncMock(return_value="fresh")

        assert await service.get_or_set("k", 60, fetch_fn) == "fresh"
        fetch_fn.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalidate_by_pattern(self, cache_service):
        await cache_service.set("dispatch:article:a", 60, "1")
        await cache_service.set("dispatch:article:b", 60, "2")
        await cache_service.set("dispatch:summary:a", 60, "3")

        deleted = await cache_service.invalidate("dispatch:article:*")

        assert deleted == 2
        assert (await cache_service.get("dispatch:summary:a")).value == "3"

    @pytest.mark.asyncio
    async def test_invalidate_returns_zero_when_cache_down(self, failing_store):
        service = CacheService(failing_store)
        await service.connect()

        assert await service.invalidate("*") == 0

    @pytest.mark.asyncio
    async def test_retention_history_capped_at_limit(self, cache_service):
        for count in range(105):
            assert await cache_service.log_retention_cleanup(count)

        history = await cache_service.get_retention_history()

        assert len(history) == 100
        assert history[0]["deletedCount"] == 5
        assert history[-1]["deletedCount"] == 104
        assert "timestamp" in history[-1]

    @pytest.mark.asyncio
    async def test_retention_history_custom_limit(self, memory_store):
        service = CacheService(memory_store, history_limit=3)
        await service.connect()

        for count in range(5):
            await service.log_retention_cleanup(count)

        assert [e["deletedCount"] for e in await service.get_retention_history()] == [2, 3, 4]

    @pytest.mark.asyncio
    async def test_retention_log_fails_open(self, failing_store):
        service = CacheService(failing_store)
        await service.connect()

        assert await service.log_retention_cleanup(3) is False
        assert await service.get_retention_history() == []

    @pytest.mark.asyncio
    async def test_history_key(self, cache_service, memory_store):
        await cache_service.log_retention_cleanup(1)

        assert await memory_store.keys_matching(CLEANUP_HISTORY_KEY) == {CLEANUP_HISTORY_KEY}

    @pytest.mark.asyncio
    async def test_close_disconnects(self, memory_store):
        service = CacheService(memory_store)
        await service.connect()
        await service.close()

        assert not service.is_connected
        assert not (await service.get("k")).success

    def test_keeps_injected_empty_store(self, memory_store):
        assert len(memory_store) == 0

        service = CacheService(memory_store)

        assert service.store is memory_store

    @pytest.mark.asyncio
    async def test_list_ttl_comes_from_injected_store(self, clock):
        service = CacheService(InMemoryCacheStore(clock=clock, list_ttl_seconds=5))
        await service.connect()
        await service.log_retention_cleanup(3)

        clock.advance(6)

        assert await service.get_retention_history() == []
