"""Utility helpers for proxyql."""

from proxyql.utils.encoding import decode_body
from proxyql.utils.hashing import content_hash

__all__ = ["content_hash", "decode_body"]
