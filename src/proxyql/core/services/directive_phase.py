"""Request-time lookup for the directive strategy."""

import logging

from proxyql.core.entities.cache_config import ProxyCacheConfig
from proxyql.core.entities.phase_result import CacheHit, PhaseResult
from proxyql.core.entities.request_state import (
    PendingDirective,
    ProxyRequest,
    RequestCacheState,
)
from proxyql.core.errors import CacheLookupError, GetPhaseError
from proxyql.core.interfaces.cache_store import ICacheStore
from proxyql.core.services.directive_analyzer import (
    has_directive,
    parse_query,
    print_query,
    remove_directive,
)
from proxyql.core.services.key_derivation import calculate_arguments

logger = logging.getLogger(__name__)

MISSING_BODY_WARNING = (
    "[skip] proxy cache: request body is not populated, "
    "make sure the body is parsed before the cache stages run"
)


class DirectivePhase:
    """Serves @cache-annotated queries from the scalar store.

    On a hit the request is answered with the cached data. On a miss the
    directive is stripped from the forwarded query and the derived id and
    timeout are recorded as a pending write.
    """

    def __init__(self, store: ICacheStore, config: ProxyCacheConfig) -> None:
        self._store = store
        self._config = config

    async def run(
        self,
        request: ProxyRequest,
        state: RequestCacheState | None = None,
    ) -> PhaseResult:
        """Run the directive lookup for one request.

        Args:
            request: The inbound request.
            state: The request's cache state so far.

        Returns:
            The phase result. Failures are returned in ``error`` together
            with the unmodified request and state.
        """
        state = state or RequestCacheState()
        passthrough = PhaseResult(request=request, state=state)

        if not self._config.enabled:
            return passthrough
        if request.body is None:
            if request.method.upper() == "POST":
                logger.warning(MISSING_BODY_WARNING)
            return passthrough
        query = request.query
        if query is None:
            return passthrough

        name = self._config.directive_name
        try:
            document = parse_query(query)
            if not has_directive(name, document):
                return passthrough

            arguments = calculate_arguments(
                document,
                request.variables,
                context=request.context,
                key_modifier=self._config.key_modifier,
                default_timeout=self._config.global_timeout,
                directive_name=name,
            )

            try:
                cached = await self._store.get(arguments.id)
            except Exception as e:
                raise CacheLookupError(
                    f"Failed to read cache key {arguments.id!r}: {e}"
                ) from e

            if cached:
                logger.debug("Directive cache hit for %r", arguments.id)
                return PhaseResult(
                    request=request,
                    state=state,
                    hit=CacheHit(
                        data=cached,
                        headers={self._config.cache_header: "true"},
                    ),
                )

            next_query = print_query(remove_directive(document, name))
        except GetPhaseError as e:
            return PhaseResult(request=request, state=state, error=e)
        except Exception as e:
            return PhaseResult(
                request=request,
                state=state,
                error=GetPhaseError.wrap(f"Directive lookup failed: {e}", e),
            )

        logger.debug("Directive cache miss for %r", arguments.id)
        return PhaseResult(
            request=request.with_body({**request.body, "query": next_query}),
            state=state.with_directive(
                PendingDirective(id=arguments.id, timeout=arguments.timeout)
            ),
        )
