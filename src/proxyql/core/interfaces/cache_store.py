"""Cache store interface."""

from typing import Any, Protocol


class ICacheStore(Protocol):
    """Contract for cache storage backends.

    Stores hold two kinds of entries: scalar entries addressed by a single
    key, and hash records mapping field names to string values. All
    methods are async so both in-memory and networked stores fit.

    Calls for disjoint keys may run concurrently. Concurrent writes to the
    same key are last-write-wins per field; nothing here is atomic.
    """

    async def get(self, key: str) -> Any | None:
        """Retrieve a scalar entry.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value, or None if not found or expired.
        """
        ...

    async def set(self, key: str, value: Any, ttl: int = 0) -> "ICacheStore":
        """Store or overwrite a scalar entry.

        Args:
            key: The cache key.
            value: The value to store. Must be JSON-serializable.
            ttl: Time-to-live in seconds. 0 means no explicit expiry
                (store-defined default).

        Returns:
            The store itself.
        """
        ...

    async def hget(self, key: str) -> dict[str, str] | None:
        """Retrieve the full field map of a hash record.

        Args:
            key: The hash key.

        Returns:
            A copy of the field map, or None if not found or expired.
        """
        ...

    async def hset(
        self,
        key: str,
        field: str,
        value: str,
        ttl: int = 0,
    ) -> "ICacheStore":
        """Write one field of a hash record and refresh its expiry.

        Args:
            key: The hash key.
            field: The field name.
            value: The field value.
            ttl: New time-to-live of the whole record in seconds.
                0 means no explicit expiry.

        Returns:
            The store itself.
        """
        ...

    async def delete(self, key: str) -> bool:
        """Delete an entry.

        Args:
            key: The cache key to delete.

        Returns:
            True if the key existed and was deleted, False otherwise.
        """
        ...
