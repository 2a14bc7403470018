"""Starlette transport stages for the proxy cache.

The caching protocol runs as three stages, composed in this order by the
routing layer (see ``CachingProxy`` for the default composition)::

    stages = create_proxy_cache_middleware(store, global_timeout=60)(
        ProxyConfig(upstream_url="http://api.internal/graphql")
    )

    exchange = await ProxyExchange.from_request(request)
    response = (
        await stages.directive_middleware(exchange)
        or await stages.hash_middleware(exchange)
        or await stages.proxy_middleware(exchange)
    )

The first two stages return a response only on a cache hit; ``None`` means
continue with the next stage. The proxy stage always returns a response.
"""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from proxyql.core.entities.cache_config import ProxyCacheConfig
from proxyql.core.entities.phase_result import PhaseResult
from proxyql.core.entities.request_state import ProxyRequest, RequestCacheState
from proxyql.core.interfaces.cache_store import ICacheStore
from proxyql.core.services.proxy_cache import ProxyCache

logger = logging.getLogger(__name__)

# Headers that describe a single connection and are never forwarded
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)


@dataclass
class ProxyConfig:
    """Upstream configuration of the proxy stage.

    Attributes:
        upstream_url: URL of the upstream GraphQL endpoint.
        client: Optional shared httpx client. One is created on first
            use (and owned by the stages) if not provided.
        timeout: Timeout in seconds of the owned client.
        on_proxy_request: Hook called with the outgoing upstream request
            before it is sent, e.g. to add auth headers.
        on_proxy_response: Hook called with the upstream response after
            the cache write and before relaying.
    """

    upstream_url: str
    client: httpx.AsyncClient | None = None
    timeout: float = 30.0
    on_proxy_request: Callable[[httpx.Request, ProxyRequest], None] | None = None
    on_proxy_response: Callable[[httpx.Response, ProxyRequest], None] | None = None


@dataclass
class ProxyExchange:
    """Per-request carrier handed from stage to stage.

    Holds the Starlette request, the transport-independent view of it and
    the cache state. Stages replace ``proxy_request`` and ``state`` with
    the values returned by the cache phases.
    """

    request: Request
    proxy_request: ProxyRequest
    raw_body: bytes = b""
    state: RequestCacheState = field(default_factory=RequestCacheState)

    @classmethod
    async def from_request(cls, request: Request) -> "ProxyExchange":
        """Read and parse the body of an inbound request.

        Bodies that are not a JSON object are kept raw and forwarded
        untouched; the cache phases then treat the request as having no
        body.
        """
        raw_body = await request.body()
        return cls(
            request=request,
            proxy_request=ProxyRequest(
                body=_parse_body(raw_body),
                headers={k.lower(): v for k, v in request.headers.items()},
                method=request.method,
                context=request,
            ),
            raw_body=raw_body,
        )


def _parse_body(raw_body: bytes) -> dict[str, Any] | None:
    if not raw_body:
        return None
    try:
        body = json.loads(raw_body)
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


class ProxyCacheStages:
    """The directive, hash and proxy stages bound to one ProxyCache."""

    def __init__(self, proxy_cache: ProxyCache, proxy_config: ProxyConfig) -> None:
        self._cache = proxy_cache
        self._config = proxy_config
        self._client = proxy_config.client
        self._owns_client = proxy_config.client is None

    @property
    def proxy_cache(self) -> ProxyCache:
        return self._cache

    async def directive_middleware(self, exchange: ProxyExchange) -> Response | None:
        """Answer @cache-annotated queries from the cache, if possible."""
        result = await self._cache.directive_phase(
            exchange.proxy_request, exchange.state
        )
        return self._apply(exchange, result)

    async def hash_middleware(self, exchange: ProxyExchange) -> Response | None:
        """Answer previously seen request bodies from the cache, if possible."""
        result = await self._cache.hash_phase(exchange.proxy_request, exchange.state)
        return self._apply(exchange, result)

    async def proxy_middleware(self, exchange: ProxyExchange) -> Response:
        """Forward the request upstream, write back and relay the reply.

        The upstream body is buffered in full and relayed byte for byte,
        still content-encoded, whatever the outcome of the cache write.
        """
        proxy_request = exchange.proxy_request
        client = self._get_client()

        upstream_request = client.build_request(
            exchange.request.method,
            self._upstream_url(exchange.request),
            headers=_forward_headers(exchange.request.headers.items()),
            content=self._request_content(exchange),
        )
        if self._config.on_proxy_request is not None:
            self._config.on_proxy_request(upstream_request, proxy_request)

        try:
            upstream = await client.send(upstream_request, stream=True)
            try:
                body = b"".join([chunk async for chunk in upstream.aiter_raw()])
            finally:
                await upstream.aclose()
        except httpx.HTTPError as e:
            logger.error("Upstream request to %s failed: %s", upstream_request.url, e)
            return JSONResponse(
                {"errors": [{"message": "Upstream request failed"}]},
                status_code=502,
            )

        await self._cache.intercept_response(
            proxy_request,
            exchange.state,
            body,
            upstream.headers.get("content-encoding"),
        )
        if self._config.on_proxy_response is not None:
            self._config.on_proxy_response(upstream, proxy_request)

        response = Response(content=body, status_code=upstream.status_code)
        response.raw_headers = [
            (name.encode("latin-1"), value.encode("latin-1"))
            for name, value in upstream.headers.multi_items()
            if name.lower() not in HOP_BY_HOP_HEADERS
            and name.lower() != "content-length"
        ] + [(b"content-length", str(len(body)).encode("latin-1"))]
        return response

    async def aclose(self) -> None:
        """Close the httpx client, if the stages created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _apply(self, exchange: ProxyExchange, result: PhaseResult) -> Response | None:
        exchange.proxy_request = result.request
        exchange.state = result.state
        if result.hit is None:
            return None
        return JSONResponse(result.hit.envelope, headers=result.hit.headers)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._config.timeout)
        return self._client

    def _upstream_url(self, request: Request) -> str:
        query = request.url.query
        if not query:
            return self._config.upstream_url
        separator = "&" if "?" in self._config.upstream_url else "?"
        return f"{self._config.upstream_url}{separator}{query}"

    def _request_content(self, exchange: ProxyExchange) -> bytes:
        # The body may have been rewritten by the directive stage
        body = exchange.proxy_request.body
        if body is None:
            return exchange.raw_body
        return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode(
            "utf-8"
        )


def _forward_headers(headers: Any) -> list[tuple[str, str]]:
    return [
        (name, value)
        for name, value in headers
        if name.lower() not in HOP_BY_HOP_HEADERS
        and name.lower() not in ("host", "content-length")
    ]


def create_proxy_cache_middleware(
    store: ICacheStore,
    key_modifier: Callable[[str, Any], str] | None = None,
    cache_bypass_header: str | None = None,
    global_timeout: int = 0,
    **config: Any,
) -> Callable[[ProxyConfig], ProxyCacheStages]:
    """Create a factory of cache stages sharing one store.

    Args:
        store: The cache store.
        key_modifier: Optional ``(id, request) -> key`` hook.
        cache_bypass_header: Optional header that disables hash caching.
        global_timeout: Default timeout in seconds.
        **config: Further ``ProxyCacheConfig`` fields.

    Returns:
        A function building the stages for one upstream.

    Example::

        stages = create_proxy_cache_middleware(
            InMemoryCacheStore(),
            cache_bypass_header="x-no-cache",
            global_timeout=300,
        )(ProxyConfig(upstream_url="http://localhost:4000/graphql"))
    """
    proxy_cache = ProxyCache(
        store,
        ProxyCacheConfig(
            key_modifier=key_modifier,
            cache_bypass_header=cache_bypass_header,
            global_timeout=global_timeout,
            **config,
        ),
    )

    def factory(proxy_config: ProxyConfig) -> ProxyCacheStages:
        return ProxyCacheStages(proxy_cache, proxy_config)

    return factory
