"""Caching GraphQL proxy ASGI app."""

from typing import Any

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from proxyql.adapters.starlette.stages import (
    ProxyCacheStages,
    ProxyConfig,
    ProxyExchange,
)
from proxyql.core.entities.cache_config import ProxyCacheConfig
from proxyql.core.interfaces.cache_store import ICacheStore
from proxyql.core.services.proxy_cache import ProxyCache


class CachingProxy:
    """ASGI app proxying GraphQL requests through the cache stages.

    Runs the directive stage, then the hash stage, then the proxy stage,
    stopping at the first stage that returns a response.

    Example::

        from starlette.applications import Starlette
        from starlette.routing import Mount

        proxy = CachingProxy.create(
            InMemoryCacheStore(),
            ProxyConfig(upstream_url="http://localhost:4000/graphql"),
            ProxyCacheConfig(global_timeout=60, cache_bypass_header="x-no-cache"),
        )
        @asynccontextmanager
        async def lifespan(app):
            yield
            await proxy.aclose()

        app = Starlette(routes=[Mount("/graphql", app=proxy)], lifespan=lifespan)
    """

    def __init__(self, stages: ProxyCacheStages) -> None:
        self._stages = stages

    @classmethod
    def create(
        cls,
        store: ICacheStore,
        proxy_config: ProxyConfig,
        config: ProxyCacheConfig | None = None,
    ) -> "CachingProxy":
        """Build the proxy from a store and its configuration."""
        return cls(ProxyCacheStages(ProxyCache(store, config), proxy_config))

    @property
    def proxy_cache(self) -> ProxyCache:
        return self._stages.proxy_cache

    @property
    def cache_stats(self) -> dict[str, int]:
        return self._stages.proxy_cache.stats

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            raise RuntimeError(f"CachingProxy only handles HTTP, got {scope['type']!r}")

        request = Request(scope, receive)
        response = await self.handle(request)
        await response(scope, receive, send)

    async def handle(self, request: Request) -> Response:
        """Run the stages for one request."""
        exchange = await ProxyExchange.from_request(request)

        for stage in (self._stages.directive_middleware, self._stages.hash_middleware):
            response = await stage(exchange)
            if response is not None:
                return response

        return await self._stages.proxy_middleware(exchange)

    async def aclose(self, *_args: Any) -> None:
        """Release the upstream client."""
        await self._stages.aclose()
