"""Infrastructure layer implementations for proxyql."""

from proxyql.infrastructure.backends import InMemoryCacheStore
from proxyql.infrastructure.serializers import JsonSerializer, SerializationError

__all__ = [
    "InMemoryCacheStore",
    "JsonSerializer",
    "SerializationError",
]
