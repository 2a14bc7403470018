"""Core interfaces (Protocol classes) for proxyql."""

from proxyql.core.interfaces.cache_store import ICacheStore
from proxyql.core.interfaces.key_modifier import IKeyModifier
from proxyql.core.interfaces.serializer import ISerializer

__all__ = [
    "ICacheStore",
    "IKeyModifier",
    "ISerializer",
]
