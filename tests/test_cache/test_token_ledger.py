import pytest
from unittest.mock import AsyncMock, MagicMock

from daily_dispatch.core.cache import CacheStore
from daily_dispatch.services.cache_service import CacheService
from daily_dispatch.services.token_ledger import (
    BLACKLIST_PREFIX,
    REVOKED_SENTINEL,
    SIGN_UPDATE_PREFIX,
    TokenRevocationLedger,
)


class TestTokenRevocationLedger:
    @pytest.fixture(autouse=True)
    def setup_ledger(self, cache_service):
        self.ledger = TokenRevocationLedger(cache_service)

    @pytest.mark.asyncio
    async def test_blacklist_marks_token(self, memory_store):
        assert await self.ledger.blacklist("jti-1")

        assert await memory_store.get(f"{BLACKLIST_PREFIX}jti-1") == REVOKED_SENTINEL
        assert await self.ledger.is_blacklisted("jti-1")
        assert not await self.ledger.is_blacklisted("jti-2")

    @pytest.mark.asyncio
    async def test_blacklist_expires_with_ttl(self, clock):
        await self.ledger.blacklist("jti-1", ttl_seconds=60)

        clock.advance(61)

        assert not await self.ledger.is_blacklisted("jti-1")

    @pytest.mark.asyncio
    async def test_sign_update_invalidates_older_tokens(self, memory_store):
        cutoff_ms = 1_700_000_000_000
        assert await self.ledger.invalidate_all_tokens_for_user("user-1", cutoff_ms)

        assert await memory_store.get(f"{SIGN_UPDATE_PREFIX}user-1") == str(cutoff_ms)
        assert await self.ledger.is_token_invalidated_by_sign_update("user-1", 1_699_999_999)
        assert not await self.ledger.is_token_invalidated_by_sign_update("user-1", 1_700_000_000)
        assert not await self.ledger.is_token_invalidated_by_sign_update("user-2", 1_600_000_000)

    @pytest.mark.asyncio
    async def test_sign_update_record_lasts_a_day(self, clock):
        await self.ledger.invalidate_all_tokens_for_user("user-1", clock.now_ms)

        clock.advance(24 * 60 * 60 - 1)
        assert await self.ledger.is_token_invalidated_by_sign_update("user-1", 0)

        clock.advance(1)
        assert not await self.ledger.is_token_invalidated_by_sign_update("user-1", 0)

    @pytest.mark.asyncio
    async def test_corrupt_sign_update_record_is_ignored(self, memory_store):
        await memory_store.set_with_ttl(f"{SIGN_UPDATE_PREFIX}user-1", 60, "yesterday")

        assert not await self.ledger.is_token_invalidated_by_sign_update("user-1", 0)

    @pytest.mark.asyncio
    async def test_is_token_revoked_combines_both_checks(self):
        await self.ledger.blacklist("jti-1")
        await self.ledger.invalidate_all_tokens_for_user("user-2", 2_000_000_000_000)

        assert await self.ledger.is_token_revoked("jti-1", "user-1", 1_900_000_000)
        assert await self.ledger.is_token_revoked("jti-9", "user-2", 1_900_000_000)
        assert not await self.ledger.is_token_revoked("jti-9", "user-1", 1_900_000_000)


class TestLedgerFailOpen:
    @pytest.mark.asyncio
    async def test_disconnected_cache_reports_not_revoked(self, memory_store):
        ledger = TokenRevocationLedger(CacheService(memory_store))

        assert not await ledger.blacklist("jti-1")
        assert not await ledger.is_blacklisted("jti-1")
        assert not await ledger.is_token_invalidated_by_sign_update("user-1", 0)
        assert not await ledger.is_token_revoked("jti-1", "user-1", 0)

    @pytest.mark.asyncio
    async def test_store_errors_report_not_revoked(self):
        store = MagicMock(spec=CacheStore)
        store.get = AsyncMock(side_effect=TimeoutError("read timed out"))
        store.set_with_ttl = AsyncMock(side_effect=TimeoutError("write timed out"))
        service = CacheService(store)
        await service.connect()
        ledger = TokenRevocationLedger(service)

        assert not await ledger.invalidate_all_tokens_for_user("user-1", 1)
        assert not await ledger.is_token_revoked("jti-1", "user-1", 0)
