"""Response-time write-back of upstream results."""

import logging
import zlib
from typing import Any

from proxyql.core.entities.cache_config import ProxyCacheConfig
from proxyql.core.entities.phase_result import InterceptResult
from proxyql.core.entities.request_state import ProxyRequest, RequestCacheState
from proxyql.core.errors import CacheWriteError, ResponseDecodeError
from proxyql.core.interfaces.cache_store import ICacheStore
from proxyql.core.interfaces.serializer import ISerializer
from proxyql.core.services.hash_phase import REQUEST_FIELD, RESPONSE_FIELD
from proxyql.infrastructure.serializers.json import SerializationError
from proxyql.utils.encoding import decode_body

logger = logging.getLogger(__name__)


class ResponseInterceptor:
    """Writes successful upstream responses back to the store.

    Runs on the fully buffered upstream body, before it is relayed. Only
    responses without ``errors`` and with a non-empty ``data`` payload
    are written. When the request carries both a body hash and a pending
    directive, the hash record wins and the directive entry is not
    written.
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

    async def run(
        self,
        request: ProxyRequest,
        state: RequestCacheState,
        body: bytes,
        content_encoding: str | None = None,
    ) -> InterceptResult:
        """Inspect one upstream response.

        Args:
            request: The request as it was forwarded upstream.
            state: The cache state produced by the request phases.
            body: The raw upstream body.
            content_encoding: The upstream ``Content-Encoding``, if any.

        Returns:
            Which strategy wrote the result, or the set-phase error.
            The caller relays the upstream response either way.
        """
        if not self._config.enabled or not state.is_pending:
            return InterceptResult()

        try:
            response = self._serializer.deserialize(decode_body(body, content_encoding))
        except (SerializationError, ValueError, zlib.error) as e:
            return InterceptResult(
                error=ResponseDecodeError.wrap(
                    f"Failed to decode upstream response: {e}", e
                )
            )
        if not isinstance(response, dict):
            return InterceptResult(
                error=ResponseDecodeError(
                    f"Upstream response is not a JSON object: {type(response).__name__}"
                )
            )

        data = response.get("data")
        if response.get("errors") is not None or not data:
            logger.debug("Not caching upstream response with errors or no data")
            return InterceptResult()

        try:
            if state.body_hash is not None:
                await self._write_hash(state.body_hash, request.body, data)
                return InterceptResult(written="hash")

            directive = state.directive
            if directive is not None:
                await self._store.set(directive.id, data, directive.timeout)
                logger.debug("Cached %r for %ss", directive.id, directive.timeout)
                return InterceptResult(written="directive")
        except Exception as e:
            return InterceptResult(
                error=CacheWriteError.wrap(f"Failed to write cache entry: {e}", e)
            )
        return InterceptResult()

    async def _write_hash(
        self,
        body_hash: str,
        body: dict[str, Any] | None,
        data: Any,
    ) -> None:
        timeout = self._config.global_timeout
        await self._store.hset(
            body_hash, REQUEST_FIELD, self._serializer.serialize(body), timeout
        )
        await self._store.hset(
            body_hash, RESPONSE_FIELD, self._serializer.serialize(data), timeout
        )
        logger.debug("Cached response for hash %s", body_hash)
