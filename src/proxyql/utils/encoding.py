"""Content-decoding of buffered upstream bodies."""

import zlib


def decode_body(body: bytes, content_encoding: str | None = None) -> bytes:
    """Undo the upstream's ``Content-Encoding``.

    Args:
        body: The raw body as received from upstream.
        content_encoding: The ``Content-Encoding`` header value, if any.

    Returns:
        The decoded bytes.

    Raises:
        ValueError: If the encoding is unsupported.
        zlib.error: If the compressed data is corrupt.
    """
    encodings = [
        part.strip().lower()
        for part in (content_encoding or "").split(",")
        if part.strip()
    ]

    # Encodings are listed in the order they were applied
    for encoding in reversed(encodings):
        if encoding == "identity":
            continue
        if encoding in ("gzip", "x-gzip"):
            body = zlib.decompress(body, wbits=zlib.MAX_WBITS | 16)
        elif encoding == "deflate":
            try:
                body = zlib.decompress(body)
            except zlib.error:
                # Some servers send raw deflate without the zlib header
                body = zlib.decompress(body, wbits=-zlib.MAX_WBITS)
        else:
            raise ValueError(f"Unsupported content encoding: {encoding}")

    return body
