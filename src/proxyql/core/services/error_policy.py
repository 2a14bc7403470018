"""Fail-open reporting of cache errors."""

import logging
from collections.abc import Callable

from proxyql.core.errors import CacheError

logger = logging.getLogger(__name__)


class ErrorPolicy:
    """Reports cache errors without ever aborting the request.

    Errors are logged per channel (``get-phase`` or ``set-phase``),
    counted, and forwarded to an optional reporter. There are no
    retries and no circuit breaking: a failing store simply degrades
    the proxy to plain passthrough.
    """

    def __init__(self, reporter: Callable[[CacheError], None] | None = None) -> None:
        """Initialize the error policy.

        Args:
            reporter: Optional callback receiving every reported error,
                e.g. to forward it to an error tracker.
        """
        self._reporter = reporter
        self._counts = {"get": 0, "set": 0}

    @property
    def stats(self) -> dict[str, int]:
        """Number of reported errors per phase."""
        return dict(self._counts)

    def report(self, error: CacheError) -> None:
        """Report a cache error.

        Args:
            error: The error returned by a phase.
        """
        self._counts[error.phase] = self._counts.get(error.phase, 0) + 1
        logger.warning(
            "[%s] proxy cache error: %s",
            error.channel,
            error,
            exc_info=error.__cause__,
        )

        if self._reporter is None:
            return
        try:
            self._reporter(error)
        except Exception:
            logger.exception("Cache error reporter failed")
