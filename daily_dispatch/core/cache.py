"""
Key/value cache store with TTL expiry and JSON-list values.

The in-memory store mirrors the subset of Redis semantics the rest of the
application relies on (GET, SETEX, KEYS, DEL, LRANGE, RPUSH, LTRIM) so a
networked backend can be substituted behind the same async contract.
"""

import json
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Set

DEFAULT_LIST_TTL_SECONDS = 30 * 24 * 60 * 60


def epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class CacheEntry:
    """A serialized value and the epoch-millis instant it stops being visible."""
    value: str
    expires_at_ms: int

    def is_expired(self, now_ms: int) -> bool:
        return self.expires_at_ms <= now_ms


def glob_to_regex(pattern: str) -> "re.Pattern[str]":
    # Only '*' is a wildcard; the match is unanchored.
    parts = [re.escape(part) for part in pattern.split("*")]
    return re.compile(".*".join(parts))


def slice_range(items: list, start: int, stop: int) -> list:
    """Inclusive range with -1 meaning through the end."""
    if stop == -1:
        return items[start:]
    return items[start:stop + 1]


class CacheStore(ABC):
    """Async key/value contract shared by cache backends."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set_with_ttl(self, key: str, ttl_seconds: int, value: str) -> None:
        """
        Store a value that stops being visible after ``ttl_seconds``.

        Args:
            key: Cache key
            ttl_seconds: Time-to-live in seconds
            value: Serialized value
        """
        pass

    @abstractmethod
    async def keys_matching(self, pattern: str) -> Set[str]:
        """Keys matching a glob where only ``*`` is a wildcard."""
        pass

    @abstractmethod
    async def delete(self, keys: Iterable[str]) -> None:
        pass

    @abstractmethod
    async def list_range(self, key: str, start: int, stop: int) -> List[str]:
        """
        Read a slice of a list value.

        Args:
            key: List key
            start: First index, negative counts from the end
            stop: Last index, inclusive; -1 reads through the end

        Returns:
            Serialized items; an empty list for a missing or corrupt value
        """
        pass

    @abstractmethod
    async def list_append(self, key: str, value: str) -> None:
        """Append one serialized item and refresh the list TTL."""
        pass

    @abstractmethod
    async def list_trim(self, key: str, start: int, stop: int) -> None:
        """Keep only the inclusive ``start``..``stop`` range of a list."""
        pass

    async def close(self) -> None:
        return None


class InMemoryCacheStore(CacheStore):
    """Process-local store. Expiry is lazy: entries are evicted when read."""

    def __init__(
        self,
        clock: Callable[[], int] = epoch_millis,
        list_ttl_seconds: int = DEFAULT_LIST_TTL_SECONDS,
    ):
        """
        Args:
            clock: Epoch-millis time source used for expiry
            list_ttl_seconds: TTL applied on every list write
        """
        self._clock = clock
        self._list_ttl_seconds = list_ttl_seconds
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _expires_at(self, ttl_seconds: int) -> int:
        return self._clock() + int(ttl_seconds * 1000)

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return entry

    def _load_list(self, key: str) -> Optional[list]:
        entry = self._live_entry(key)
        if entry is None:
            return None
        try:
            items = json.loads(entry.value)
        except (TypeError, ValueError):
            return None
        if not isinstance(items, list):
            return None
        return items

    def _store_list(self, key: str, items: list) -> None:
        self._entries[key] = CacheEntry(
            value=json.dumps(items),
            expires_at_ms=self._expires_at(self._list_ttl_seconds)
        )

    async def get(self, key: str) -> Optional[str]:
        entry = self._live_entry(key)
        return entry.value if entry else None

    async def set_with_ttl(self, key: str, ttl_seconds: int, value: str) -> None:
        self._entries[key] = CacheEntry(value=value, expires_at_ms=self._expires_at(ttl_seconds))

    async def keys_matching(self, pattern: str) -> Set[str]:
        regex = glob_to_regex(pattern)
        return {key for key in self._entries if regex.search(key)}

    async def delete(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._entries.pop(key, None)

    async def list_range(self, key: str, start: int, stop: int) -> List[str]:
        items = self._load_list(key)
        if items is None:
            return []
        return [json.dumps(item) for item in slice_range(items, start, stop)]

    async def list_append(self, key: str, value: str) -> None:
        items = self._load_list(key) or []
        items.append(json.loads(value))
        self._store_list(key, items)

    async def list_trim(self, key: str, start: int, stop: int) -> None:
        items = self._load_list(key)
        if items is None:
            return
        self._store_list(key, slice_range(items, start, stop))

    async def close(self) -> None:
        self._entries.clear()
