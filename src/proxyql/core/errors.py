"""Error taxonomy for cache failures.

Every cache-related failure belongs to one of two channels:

- get-phase: the request-time lookup (parsing the annotation, deriving the
  key, reading the store). The request continues as a cache miss.
- set-phase: the response-time write (decoding the upstream body, writing
  the store). The upstream response is relayed anyway.

None of these errors ever reach the original caller.
"""


class CacheError(Exception):
    """Base class for all cache failures."""

    phase: str = "unknown"

    @classmethod
    def wrap(cls, message: str, cause: BaseException) -> "CacheError":
        """Create an error caused by another exception without raising it."""
        error = cls(message)
        error.__cause__ = cause
        return error

    @property
    def channel(self) -> str:
        """Name of the reporting channel, e.g. ``"get-phase"``."""
        return f"{self.phase}-phase"


class GetPhaseError(CacheError):
    """Failure while looking up a cached result."""

    phase = "get"


class DirectiveParseError(GetPhaseError):
    """The query text could not be parsed."""


class DirectiveArgumentError(GetPhaseError):
    """The @cache directive arguments are missing or invalid."""


class CacheLookupError(GetPhaseError):
    """The cache store failed during a read."""


class SetPhaseError(CacheError):
    """Failure while writing a fresh result to the cache."""

    phase = "set"


class ResponseDecodeError(SetPhaseError):
    """The upstream response body could not be decoded."""


class CacheWriteError(SetPhaseError):
    """The cache store failed during a write."""
