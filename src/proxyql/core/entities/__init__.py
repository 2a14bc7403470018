"""Domain entities for proxyql."""

from proxyql.core.entities.cache_config import (
    CACHE_HASH_HEADER,
    CACHE_HEADER,
    ProxyCacheConfig,
)
from proxyql.core.entities.phase_result import CacheHit, InterceptResult, PhaseResult
from proxyql.core.entities.request_state import (
    PendingDirective,
    ProxyRequest,
    RequestCacheState,
)
from proxyql.core.entities.stored_entry import StoredEntry

__all__ = [
    "ProxyCacheConfig",
    "CACHE_HEADER",
    "CACHE_HASH_HEADER",
    # Per-request state
    "ProxyRequest",
    "PendingDirective",
    "RequestCacheState",
    # Phase results
    "CacheHit",
    "PhaseResult",
    "InterceptResult",
    # Storage
    "StoredEntry",
]
