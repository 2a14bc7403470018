"""JSON serializer implementation."""

import json
from typing import Any


class SerializationError(Exception):
    """Raised when serialization or deserialization fails."""

    pass


class JsonSerializer:
    """Compact JSON serializer for request bodies and payloads.

    Output matches what a JavaScript client would send with
    ``JSON.stringify``: no whitespace, keys in insertion order and
    non-ASCII characters left as-is. Key order is deliberately not
    normalized, so two bodies hash the same only if they serialize to
    the same text.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the JSON serializer.

        Args:
            encoding: Character encoding used when decoding bytes.
        """
        self._encoding = encoding

    def serialize(self, value: Any) -> str:
        """Serialize value to compact JSON text.

        Args:
            value: The Python object to serialize.

        Returns:
            The JSON text.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        try:
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize value: {e}") from e

    def deserialize(self, data: str | bytes) -> Any:
        """Deserialize JSON text or bytes to value.

        Args:
            data: The JSON text or encoded bytes.

        Returns:
            The deserialized Python object.

        Raises:
            SerializationError: If the data cannot be deserialized.
        """
        try:
            if isinstance(data, bytes):
                data = data.decode(self._encoding)
            return json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
            raise SerializationError(f"Failed to deserialize data: {e}") from e
