"""Hashing utilities for cache key generation."""

import hashlib


def content_hash(text: str) -> str:
    """Create the content-address of a serialized request body.

    MD5 is used for content addressing only, not for security.

    Args:
        text: The serialized body.

    Returns:
        The 32-character hexadecimal digest.
    """
    return hashlib.md5(text.encode("utf-8"), usedforsecurity=False).hexdigest()
