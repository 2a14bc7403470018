"""Stored entry entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StoredEntry:
    """Immutable value held by an in-process cache store.

    ``value`` is either a scalar result or, for hash keys, a mapping of
    field name to string value. ``ttl`` is in seconds; None means the
    entry never expires.
    """

    value: Any
    ttl: float | None = None
    is_hash: bool = False

    @classmethod
    def create(
        cls,
        value: Any,
        ttl: float | None = None,
        is_hash: bool = False,
    ) -> "StoredEntry":
        """Factory method to create a new entry.

        Args:
            value: The value to store. Hash records are copied.
            ttl: Optional time-to-live in seconds. Zero or negative
                values are rejected.
            is_hash: Whether the value is a hash record.

        Returns:
            A new StoredEntry instance.
        """
        if ttl is not None and ttl <= 0:
            raise ValueError(f"ttl must be positive or None, got {ttl}")
        return cls(
            value=dict(value) if is_hash else value,
            ttl=ttl,
            is_hash=is_hash,
        )
