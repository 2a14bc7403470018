"""Redis cache store implementation."""

import json
from typing import Any

import redis.asyncio as redis


class RedisCacheStore:
    """Redis cache store for distributed deployments.

    Scalar entries are stored JSON-encoded with ``SET``; hash records
    map directly to Redis hashes. Suitable for multi-process and
    distributed deployments sharing one cache.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str = "proxyql",
        default_ttl: int | None = None,
        client: redis.Redis | None = None,
    ) -> None:
        """Initialize the Redis cache store.

        Args:
            redis_url: Redis connection URL.
            key_prefix: Prefix for all cache keys.
            default_ttl: TTL in seconds applied when a write passes
                ``ttl=0``. None means such keys never expire.
            client: Optional pre-built client, used instead of
                ``redis_url``.

        Raises:
            ValueError: If default_ttl is zero or negative.
        """
        if default_ttl is not None and default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive or None, got {default_ttl}")

        self._redis: redis.Redis = client or redis.from_url(  # type: ignore
            redis_url, decode_responses=True
        )
        self._key_prefix = key_prefix
        self._default_ttl = default_ttl

    async def get(self, key: str) -> Any | None:
        """Retrieve a scalar entry.

        Args:
            key: The cache key to retrieve.

        Returns:
            The decoded value, or None if not found or expired.
        """
        raw = await self._redis.get(self._prefixed_key(key))
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl: int = 0) -> "RedisCacheStore":
        """Store or overwrite a scalar entry.

        Args:
            key: The cache key.
            value: The value to store, JSON-encoded.
            ttl: Time-to-live in seconds, 0 for the store default.

        Returns:
            The store itself.
        """
        prefixed_key = self._prefixed_key(key)
        encoded = json.dumps(value, separators=(",", ":"))
        effective_ttl = self._effective_ttl(ttl)

        if effective_ttl is not None:
            await self._redis.set(prefixed_key, encoded, ex=effective_ttl)
        else:
            await self._redis.set(prefixed_key, encoded)
        return self

    async def hget(self, key: str) -> dict[str, str] | None:
        """Retrieve the full field map of a hash record.

        Args:
            key: The hash key.

        Returns:
            The field map, or None if not found or expired.
        """
        fields = await self._redis.hgetall(self._prefixed_key(key))
        if not fields:
            return None
        return {_to_str(name): _to_str(value) for name, value in fields.items()}

    async def hset(
        self,
        key: str,
        field: str,
        value: str,
        ttl: int = 0,
    ) -> "RedisCacheStore":
        """Write one field of a hash record and refresh its expiry.

        Args:
            key: The hash key.
            field: The field name.
            value: The field value.
            ttl: New time-to-live of the record, 0 for the store default.

        Returns:
            The store itself.
        """
        prefixed_key = self._prefixed_key(key)
        effective_ttl = self._effective_ttl(ttl)

        await self._redis.hset(prefixed_key, field, value)
        if effective_ttl is not None:
            await self._redis.expire(prefixed_key, effective_ttl)
        else:
            await self._redis.persist(prefixed_key)
        return self

    async def delete(self, key: str) -> bool:
        """Delete an entry.

        Args:
            key: The cache key to delete.

        Returns:
            True if the key existed and was deleted, False otherwise.
        """
        result = await self._redis.delete(self._prefixed_key(key))
        return result > 0

    def _effective_ttl(self, ttl: int) -> int | None:
        if ttl and ttl > 0:
            return int(ttl)
        return self._default_ttl

    def _prefixed_key(self, key: str) -> str:
        """Add prefix to key if not already present.

        Args:
            key: The cache key.

        Returns:
            The key with prefix.
        """
        if key.startswith(f"{self._key_prefix}:"):
            return key
        return f"{self._key_prefix}:{key}"

    async def close(self) -> None:
        """Close the Redis connection."""
        await self._redis.aclose()

    async def __aenter__(self) -> "RedisCacheStore":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()


def _to_str(value: str | bytes) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value
