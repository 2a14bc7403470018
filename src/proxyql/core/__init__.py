"""Core domain layer for proxyql."""

from proxyql.core.entities import (
    PendingDirective,
    ProxyCacheConfig,
    ProxyRequest,
    RequestCacheState,
)
from proxyql.core.errors import CacheError, GetPhaseError, SetPhaseError
from proxyql.core.interfaces import ICacheStore, IKeyModifier, ISerializer
from proxyql.core.services import ProxyCache

__all__ = [
    # Entities
    "ProxyCacheConfig",
    "ProxyRequest",
    "PendingDirective",
    "RequestCacheState",
    # Errors
    "CacheError",
    "GetPhaseError",
    "SetPhaseError",
    # Interfaces
    "ICacheStore",
    "IKeyModifier",
    "ISerializer",
    # Services
    "ProxyCache",
]
