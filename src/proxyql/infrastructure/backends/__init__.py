"""Cache store implementations.

``RedisCacheStore`` lives in ``proxyql.infrastructure.backends.redis`` and
needs the ``redis`` extra.
"""

from proxyql.infrastructure.backends.memory import InMemoryCacheStore

__all__ = ["InMemoryCacheStore"]
