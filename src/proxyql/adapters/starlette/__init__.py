"""Starlette adapter for proxyql."""

from proxyql.adapters.starlette.app import CachingProxy
from proxyql.adapters.starlette.stages import (
    ProxyCacheStages,
    ProxyConfig,
    ProxyExchange,
    create_proxy_cache_middleware,
)

__all__ = [
    # Recommended: ASGI app running all stages
    "CachingProxy",
    # Individual stages for custom composition
    "ProxyCacheStages",
    "ProxyConfig",
    "ProxyExchange",
    "create_proxy_cache_middleware",
]
