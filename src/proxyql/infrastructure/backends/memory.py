"""In-memory cache store implementation."""

import copy
import math
import time
from collections.abc import Callable
from typing import Any

from cachetools import TLRUCache  # type: ignore[import-untyped]

from proxyql.core.entities.stored_entry import StoredEntry


def _time_to_use(key: str, entry: StoredEntry, now: float) -> float:
    if entry.ttl is None:
        return math.inf
    return now + entry.ttl


class InMemoryCacheStore:
    """In-memory cache store using LRU with per-entry TTL.

    Suitable for single-process deployments. Uses cachetools'
    ``TLRUCache`` so every entry expires after its own TTL, and the
    least recently used entry is evicted once ``maxsize`` is reached.
    Hash records count as a single entry.
    """

    def __init__(
        self,
        maxsize: int = 1000,
        default_ttl: float | None = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache store.

        Args:
            maxsize: Maximum number of entries in the cache.
            default_ttl: TTL in seconds applied when a write passes
                ``ttl=0``. None means such entries never expire.
            timer: Clock used for expiry, in seconds.

        Raises:
            ValueError: If default_ttl is zero or negative.
        """
        if default_ttl is not None and default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive or None, got {default_ttl}")

        self._maxsize = maxsize
        self._default_ttl = default_ttl
        self._cache: TLRUCache[str, StoredEntry] = TLRUCache(
            maxsize=maxsize,
            ttu=_time_to_use,
            timer=timer,
        )

    async def get(self, key: str) -> Any | None:
        """Retrieve a scalar entry.

        Args:
            key: The cache key to retrieve.

        Returns:
            A copy of the cached value, or None if not found, expired or
            the key holds a hash record.
        """
        entry = self._cache.get(key)
        if entry is None or entry.is_hash:
            return None
        return copy.deepcopy(entry.value)

    async def set(self, key: str, value: Any, ttl: int = 0) -> "InMemoryCacheStore":
        """Store or overwrite a scalar entry.

        Args:
            key: The cache key.
            value: The value to store. A deep copy is kept.
            ttl: Time-to-live in seconds, 0 for the store default.

        Returns:
            The store itself.
        """
        self._cache[key] = StoredEntry.create(
            copy.deepcopy(value), ttl=self._effective_ttl(ttl)
        )
        return self

    async def hget(self, key: str) -> dict[str, str] | None:
        """Retrieve the full field map of a hash record.

        Args:
            key: The hash key.

        Returns:
            A copy of the field map, or None if not found, expired or the
            key holds a scalar entry.
        """
        entry = self._cache.get(key)
        if entry is None or not entry.is_hash:
            return None
        return dict(entry.value)

    async def hset(
        self,
        key: str,
        field: str,
        value: str,
        ttl: int = 0,
    ) -> "InMemoryCacheStore":
        """Write one field of a hash record and refresh its expiry.

        A scalar entry under the same key is replaced.

        Args:
            key: The hash key.
            field: The field name.
            value: The field value.
            ttl: New time-to-live of the record, 0 for the store default.

        Returns:
            The store itself.
        """
        entry = self._cache.get(key)
        fields: dict[str, str] = (
            dict(entry.value) if entry is not None and entry.is_hash else {}
        )
        fields[field] = value
        self._cache[key] = StoredEntry.create(
            fields, ttl=self._effective_ttl(ttl), is_hash=True
        )
        return self

    async def delete(self, key: str) -> bool:
        """Delete an entry.

        Args:
            key: The cache key to delete.

        Returns:
            True if the key existed and was deleted, False otherwise.
        """
        # Membership honours expiry, so expired keys report False
        if key not in self._cache:
            return False
        try:
            del self._cache[key]
            return True
        except KeyError:
            return False

    async def clear(self) -> None:
        """Clear all entries."""
        self._cache.clear()

    def _effective_ttl(self, ttl: int) -> float | None:
        if ttl and ttl > 0:
            return float(ttl)
        return self._default_ttl

    def __len__(self) -> int:
        """Return the number of entries in the cache."""
        return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Return the maximum size of the cache."""
        return self._maxsize
