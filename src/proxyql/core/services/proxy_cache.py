"""Proxy cache - main orchestrator for the caching protocol."""

import logging

from proxyql.core.entities.cache_config import ProxyCacheConfig
from proxyql.core.entities.phase_result import InterceptResult, PhaseResult
from proxyql.core.entities.request_state import ProxyRequest, RequestCacheState
from proxyql.core.interfaces.cache_store import ICacheStore
from proxyql.core.interfaces.serializer import ISerializer
from proxyql.core.services.directive_phase import DirectivePhase
from proxyql.core.services.error_policy import ErrorPolicy
from proxyql.core.services.hash_phase import HashPhase
from proxyql.core.services.response_interceptor import ResponseInterceptor
from proxyql.infrastructure.serializers.json import JsonSerializer

logger = logging.getLogger(__name__)


class ProxyCache:
    """Domain service running the per-request caching protocol.

    This is the main entry point of the core. It composes the store,
    the configuration and the three phases, and routes every error a
    phase returns through the error policy. Per request, a transport
    calls, in order:

    1. ``directive_phase`` - may answer from the directive cache.
    2. ``hash_phase`` - may answer from the hash cache.
    3. ``intercept_response`` - after the upstream reply, before relaying.
    """

    def __init__(
        self,
        store: ICacheStore,
        config: ProxyCacheConfig | None = None,
        serializer: ISerializer | None = None,
        error_policy: ErrorPolicy | None = None,
    ) -> None:
        """Initialize the proxy cache.

        Args:
            store: The cache store shared by all requests.
            config: Optional configuration. Uses defaults if not provided.
            serializer: Optional serializer. Uses compact JSON if not provided.
            error_policy: Optional error policy. Built from
                ``config.error_reporter`` if not provided.
        """
        self._store = store
        self._config = config or ProxyCacheConfig()
        self._serializer = serializer or JsonSerializer()
        self._errors = error_policy or ErrorPolicy(self._config.error_reporter)

        self._directive = DirectivePhase(store, self._config)
        self._hash = HashPhase(store, self._serializer, self._config)
        self._interceptor = ResponseInterceptor(store, self._serializer, self._config)

        # Statistics
        self._hits = 0
        self._misses = 0
        self._writes = 0

    @property
    def config(self) -> ProxyCacheConfig:
        """Get the configuration."""
        return self._config

    @property
    def store(self) -> ICacheStore:
        return self._store

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, writes and errors per phase.
        """
        errors = self._errors.stats
        return {
            "hits": self._hits,
            "misses": self._misses,
            "writes": self._writes,
            "get_errors": errors.get("get", 0),
            "set_errors": errors.get("set", 0),
        }

    async def directive_phase(
        self,
        request: ProxyRequest,
        state: RequestCacheState | None = None,
    ) -> PhaseResult:
        """Run the directive lookup.

        Args:
            request: The inbound request.
            state: Optional state; a fresh one is created if omitted.

        Returns:
            The phase result.
        """
        result = await self._directive.run(request, state or RequestCacheState())
        return self._record(result)

    async def hash_phase(
        self,
        request: ProxyRequest,
        state: RequestCacheState,
    ) -> PhaseResult:
        """Run the hash lookup on the output of the directive phase."""
        result = await self._hash.run(request, state)
        return self._record(result)

    async def intercept_response(
        self,
        request: ProxyRequest,
        state: RequestCacheState,
        body: bytes,
        content_encoding: str | None = None,
    ) -> InterceptResult:
        """Write back a buffered upstream response.

        Args:
            request: The request as forwarded upstream.
            state: The state returned by the hash phase.
            body: The raw upstream body.
            content_encoding: The upstream ``Content-Encoding``, if any.

        Returns:
            The intercept result. The caller relays the upstream response
            whatever it contains.
        """
        if state.is_pending:
            self._misses += 1

        result = await self._interceptor.run(request, state, body, content_encoding)
        if result.error is not None:
            self._errors.report(result.error)
        if result.written is not None:
            self._writes += 1
        return result

    def _record(self, result: PhaseResult) -> PhaseResult:
        if result.error is not None:
            self._errors.report(result.error)
        if result.hit is not None:
            self._hits += 1
        return result
