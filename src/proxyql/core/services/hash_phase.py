"""Request-time lookup for the hash strategy."""

import logging
from datetime import datetime, timezone

from proxyql.core.entities.cache_config import ProxyCacheConfig
from proxyql.core.entities.phase_result import CacheHit, PhaseResult
from proxyql.core.entities.request_state import ProxyRequest, RequestCacheState
from proxyql.core.errors import CacheLookupError, GetPhaseError
from proxyql.core.interfaces.cache_store import ICacheStore
from proxyql.core.interfaces.serializer import ISerializer
from proxyql.core.services.directive_phase import MISSING_BODY_WARNING
from proxyql.core.services.key_derivation import hash_request_body
from proxyql.infrastructure.serializers.json import SerializationError

logger = logging.getLogger(__name__)

# Fields of the hash record kept per request body
LAST_REQUESTED_FIELD = "lastRequested"
REQUEST_FIELD = "request"
RESPONSE_FIELD = "response"


def _timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. ``2024-01-01T00:00:00.000Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HashPhase:
    """Serves repeated request bodies from hash records.

    Every request with a query is keyed by the hash of its serialized
    body. The record's ``lastRequested`` field is touched on every call,
    hit or miss, and a stored ``response`` field answers the request.
    """

    def __init__(
        self,
        store: ICacheStore,
        serializer: ISerializer,
        config: ProxyCacheConfig,
    ) -> None:
        self._store = store
        self._serializer = serializer
        self._config = config

    def is_bypassed(self, request: ProxyRequest) -> bool:
        """Check if the caller opted out of hash caching for this request."""
        header = self._config.cache_bypass_header
        return bool(header and request.header(header))

    async def run(self, request: ProxyRequest, state: RequestCacheState) -> PhaseResult:
        """Run the hash lookup for one request.

        Args:
            request: The request, after the directive phase.
            state: The request's cache state so far.

        Returns:
            The phase result. Once computed, the body hash is kept in the
            state even if the store fails afterwards.
        """
        passthrough = PhaseResult(request=request, state=state)

        if not self._config.enabled:
            return passthrough
        if request.body is None:
            if request.method.upper() == "POST":
                logger.warning(MISSING_BODY_WARNING)
            return passthrough
        if request.query is None or self.is_bypassed(request):
            return passthrough

        try:
            body_hash = hash_request_body(request.body, self._serializer)
        except SerializationError as e:
            return PhaseResult(
                request=request,
                state=state,
                error=GetPhaseError.wrap(f"Failed to hash request body: {e}", e),
            )
        state = state.with_hash(body_hash)

        try:
            record = await self._lookup(body_hash)
            if record is None or not record.get(RESPONSE_FIELD):
                logger.debug("Hash cache miss for %s", body_hash)
                return PhaseResult(request=request, state=state)
            data = self._serializer.deserialize(record[RESPONSE_FIELD])
        except GetPhaseError as e:
            return PhaseResult(request=request, state=state, error=e)
        except SerializationError as e:
            return PhaseResult(
                request=request,
                state=state,
                error=GetPhaseError.wrap(
                    f"Corrupt cached response for {body_hash}: {e}", e
                ),
            )

        logger.debug("Hash cache hit for %s", body_hash)
        return PhaseResult(
            request=request,
            state=state,
            hit=CacheHit(
                data=data,
                headers={
                    self._config.cache_header: "true",
                    self._config.hash_header: body_hash,
                },
            ),
        )

    async def _lookup(self, body_hash: str) -> dict[str, str] | None:
        try:
            await self._store.hset(
                body_hash,
                LAST_REQUESTED_FIELD,
                _timestamp(),
                self._config.global_timeout,
            )
            return await self._store.hget(body_hash)
        except Exception as e:
            raise CacheLookupError(
                f"Failed to read hash record {body_hash}: {e}"
            ) from e
