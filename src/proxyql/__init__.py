"""proxyql - Response caching for GraphQL reverse proxies.

A Python library deciding, per request, whether a GraphQL request can be
answered from cache instead of being forwarded upstream, and whether the
upstream response should be stored for later reuse. Two strategies are
supported:

- Directive: the client annotates the operation with
  ``@cache(id: "...", timeout: 60)``; the result is cached under that id
  and the directive is stripped before forwarding.
- Hash: every request body is keyed by its content hash and the response
  is kept in a hash record alongside the request.

Caching is best-effort: store failures are logged and the request is
proxied as if the cache were empty.

Example with Starlette:
    from starlette.applications import Starlette
    from starlette.routing import Mount

    from proxyql import InMemoryCacheStore, ProxyCacheConfig
    from proxyql.adapters.starlette import CachingProxy, ProxyConfig

    proxy = CachingProxy.create(
        InMemoryCacheStore(maxsize=10_000),
        ProxyConfig(upstream_url="http://localhost:4000/graphql"),
        ProxyCacheConfig(global_timeout=300, cache_bypass_header="x-no-cache"),
    )
    app = Starlette(routes=[Mount("/graphql", app=proxy)])

Per-user keys for the directive strategy:
    def per_user(cache_id: str, request) -> str:
        return f"{request.headers.get('x-user-id', 'anonymous')}:{cache_id}"

    config = ProxyCacheConfig(key_modifier=per_user)
"""

from proxyql.core.entities import (
    CACHE_HASH_HEADER,
    CACHE_HEADER,
    CacheHit,
    InterceptResult,
    PendingDirective,
    PhaseResult,
    ProxyCacheConfig,
    ProxyRequest,
    RequestCacheState,
)
from proxyql.core.errors import (
    CacheError,
    CacheLookupError,
    CacheWriteError,
    DirectiveArgumentError,
    DirectiveParseError,
    GetPhaseError,
    ResponseDecodeError,
    SetPhaseError,
)
from proxyql.core.interfaces import ICacheStore, IKeyModifier, ISerializer
from proxyql.core.services import (
    CACHE_DIRECTIVE,
    DirectivePhase,
    ErrorPolicy,
    HashPhase,
    ProxyCache,
    ResponseInterceptor,
    get_cache_directive_sdl,
)
from proxyql.infrastructure import InMemoryCacheStore, JsonSerializer

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "ProxyCacheConfig",
    "CACHE_HEADER",
    "CACHE_HASH_HEADER",
    "CACHE_DIRECTIVE",
    "get_cache_directive_sdl",
    # Per-request entities
    "ProxyRequest",
    "PendingDirective",
    "RequestCacheState",
    "CacheHit",
    "PhaseResult",
    "InterceptResult",
    # Errors
    "CacheError",
    "GetPhaseError",
    "SetPhaseError",
    "DirectiveParseError",
    "DirectiveArgumentError",
    "CacheLookupError",
    "ResponseDecodeError",
    "CacheWriteError",
    # Core interfaces
    "ICacheStore",
    "IKeyModifier",
    "ISerializer",
    # Core services
    "ProxyCache",
    "DirectivePhase",
    "HashPhase",
    "ResponseInterceptor",
    "ErrorPolicy",
    # Infrastructure implementations
    "InMemoryCacheStore",
    "JsonSerializer",
]
