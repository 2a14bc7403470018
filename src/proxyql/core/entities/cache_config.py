"""Proxy cache configuration entity."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from proxyql.core.errors import CacheError

CACHE_HEADER = "X-Proxy-Cached"
CACHE_HASH_HEADER = "X-Proxy-Hash"


@dataclass
class ProxyCacheConfig:
    """Proxy cache configuration.

    Supplied once at construction time; there is no runtime
    reconfiguration.

    Directive strategy:
        Queries annotated with ``@cache(id: ..., timeout: ...)`` are cached
        under the declared id, optionally rewritten by ``key_modifier``.
        A directive without ``timeout`` uses ``global_timeout``.

    Hash strategy:
        Every request with a query is keyed by the hash of its full body
        and stored as a hash record for ``global_timeout`` seconds, unless
        ``cache_bypass_header`` is configured and present on the request.
    """

    enabled: bool = True
    global_timeout: int = 0  # Seconds, 0 = no explicit expiry
    cache_bypass_header: str | None = None
    key_modifier: Callable[[str, Any], str] | None = None
    directive_name: str = "cache"

    # Response markers
    cache_header: str = CACHE_HEADER
    hash_header: str = CACHE_HASH_HEADER

    # Extra sink for reported cache errors (logging always happens)
    error_reporter: Callable[[CacheError], None] | None = None

    def __post_init__(self) -> None:
        """Validate the timeout."""
        if self.global_timeout < 0:
            raise ValueError(
                f"global_timeout must be >= 0, got {self.global_timeout}"
            )
