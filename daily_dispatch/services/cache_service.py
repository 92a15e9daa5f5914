"""
Fail-open cache service.

Every store call goes through ``execute``, which turns backend failures into
failed ``OperationResult`` objects. Public helpers then choose the fail-open
behaviour: reads become misses, writes become logged no-ops.
"""

import json
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

import structlog

from ..core.cache import CacheStore, InMemoryCacheStore
from ..core.results import OperationResult

logger = structlog.get_logger(__name__)

T = TypeVar("T")

CLEANUP_HISTORY_KEY = "notifications:cleanup:history"


class CacheService:
    """
    Fail-open wrapper around a cache store.

    Features:
    - Failed results instead of exceptions for every store call
    - Read-through JSON caching
    - Pattern invalidation
    - Capped retention-cleanup history
    """

    def __init__(self, store: Optional[CacheStore] = None, history_limit: int = 100):
        """
        Initialize the cache service.

        Args:
            store: Backend store; a process-local store is created when omitted
            history_limit: Number of retention-cleanup entries kept
        """
        self.store = store if store is not None else InMemoryCacheStore()
        self.history_limit = history_limit
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected and self.store is not None

    async def connect(self) -> None:
        self._connected = True
        logger.info("cache_connected", backend=type(self.store).__name__)

    async def close(self) -> None:
        if not self._connected:
            return
        self._connected = False
        try:
            await self.store.close()
        except Exception as e:
            logger.warning("cache_close_failed", error=str(e))
        logger.info("cache_closed")

    async def execute(self, op_name: str, operation: Callable[[CacheStore], Awaitable[T]]) -> OperationResult[T]:
        """
        Run one store operation, turning any failure into a failed result.

        Args:
            op_name: Operation name used in the warning log
            operation: Coroutine function receiving the store

        Returns:
            OperationResult carrying the value or the error message
        """
        if not self.is_connected:
            return OperationResult.fail("cache not connected")
        try:
            return OperationResult.ok(await operation(self.store))
        except Exception as e:
            logger.warning("cache_operation_failed", operation=op_name, error=str(e))
            return OperationResult.fail(str(e))

    async def get(self, key: str) -> OperationResult[Optional[str]]:
        return await self.execute("get", lambda store: store.get(key))

    async def set(self, key: str, ttl_seconds: int, value: str) -> OperationResult[None]:
        return await self.execute("set", lambda store: store.set_with_ttl(key, ttl_seconds, value))

    async def get_or_set(self, key: str, ttl_seconds: int, fetch_fn: Callable[[], Awaitable[Any]]) -> Any:
        """Read-through cache for JSON-serialisable values.

        Any cache failure falls back to ``fetch_fn`` directly.
        """
        cached = await self.get(key)
        if cached.success and cached.value:
            try:
                return json.loads(cached.value)
            except ValueError:
                logger.warning("cache_value_corrupt", key=key)

        value = await fetch_fn()
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.warning("cache_value_not_serializable", key=key, error=str(e))
            return value

        await self.set(key, ttl_seconds, payload)
        return value

    async def invalidate(self, pattern: str) -> int:
        """
        Delete every key matching a glob pattern.

        Args:
            pattern: Glob where only ``*`` is a wildcard

        Returns:
            Number of keys deleted; 0 when the cache is unavailable
        """
        keys = await self.execute("keys", lambda store: store.keys_matching(pattern))
        if not keys.success or not keys.value:
            return 0

        deleted = await self.execute("delete", lambda store: store.delete(keys.value))
        if not deleted.success:
            return 0

        logger.info("cache_invalidated", pattern=pattern, count=len(keys.value))
        return len(keys.value)

    async def log_retention_cleanup(self, deleted_count: int) -> bool:
        """Append a cleanup record to the history list and trim it to ``history_limit``."""
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "deletedCount": deleted_count,
        }
        appended = await self.execute(
            "list_append",
            lambda store: store.list_append(CLEANUP_HISTORY_KEY, json.dumps(entry))
        )
        if not appended.success:
            return False

        trimmed = await self.execute(
            "list_trim",
            lambda store: store.list_trim(CLEANUP_HISTORY_KEY, -self.history_limit, -1)
        )
        return trimmed.success

    async def get_retention_history(self) -> List[Dict[str, Any]]:
        entries = await self.execute("list_range", lambda store: store.list_range(CLEANUP_HISTORY_KEY, 0, -1))
        return [json.loads(e) for e in entries.value_or([])]
