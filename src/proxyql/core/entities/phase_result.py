"""Results returned by the cache phases.

Phases never raise for cache failures. They hand back the (possibly
rewritten) request, the updated state, an optional cache hit and an
optional error, and the caller decides what to do with each.
"""

from dataclasses import dataclass, field
from typing import Any

from proxyql.core.entities.request_state import ProxyRequest, RequestCacheState
from proxyql.core.errors import CacheError


@dataclass(frozen=True)
class CacheHit:
    """A cached result that satisfies the request without going upstream."""

    data: Any
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def envelope(self) -> dict[str, Any]:
        """The standard GraphQL success envelope."""
        return {"data": self.data}


@dataclass(frozen=True)
class PhaseResult:
    """Outcome of a request-time phase."""

    request: ProxyRequest
    state: RequestCacheState
    hit: CacheHit | None = None
    error: CacheError | None = None

    @property
    def is_hit(self) -> bool:
        return self.hit is not None


@dataclass(frozen=True)
class InterceptResult:
    """Outcome of the response-time phase.

    Attributes:
        written: The strategy used for the write (``"hash"`` or
            ``"directive"``), or None when nothing was written.
        error: The set-phase error, if any.
    """

    written: str | None = None
    error: CacheError | None = None
