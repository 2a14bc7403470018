"""Per-request entities threaded through the cache phases."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ProxyRequest:
    """Transport-independent view of an inbound GraphQL request.

    ``body`` is the parsed JSON body (``{"query": ..., "variables": ...}``)
    or None when the transport could not populate it. Header names are
    expected lower-cased.
    """

    body: dict[str, Any] | None
    headers: Mapping[str, str] = field(default_factory=dict)
    method: str = "POST"
    context: Any = None

    @property
    def query(self) -> str | None:
        """The query text, if any."""
        if not self.body:
            return None
        query = self.body.get("query")
        return query if isinstance(query, str) and query else None

    @property
    def variables(self) -> Mapping[str, Any] | None:
        """The variables object, if the client sent a JSON object."""
        if not self.body:
            return None
        variables = self.body.get("variables")
        return variables if isinstance(variables, Mapping) else None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower())

    def with_body(self, body: dict[str, Any] | None) -> "ProxyRequest":
        """Return a copy of this request with a different body."""
        return replace(self, body=body)


@dataclass(frozen=True)
class PendingDirective:
    """Directive-style write waiting for the upstream response."""

    id: str
    timeout: int


@dataclass(frozen=True)
class RequestCacheState:
    """Cache state carried from the request phases to the interceptor.

    Created empty for each request, filled by the directive phase
    (``directive``) and the hash phase (``body_hash``), consumed by the
    response interceptor and then discarded.
    """

    directive: PendingDirective | None = None
    body_hash: str | None = None

    @property
    def is_pending(self) -> bool:
        """Check if a cache write may follow the upstream response."""
        return self.directive is not None or self.body_hash is not None

    def with_directive(self, directive: PendingDirective) -> "RequestCacheState":
        return replace(self, directive=directive)

    def with_hash(self, body_hash: str) -> "RequestCacheState":
        return replace(self, body_hash=body_hash)
