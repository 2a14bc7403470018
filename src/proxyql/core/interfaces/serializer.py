"""Serializer interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Contract for serializing request bodies and response payloads.

    The serialized text of a request body is what the hash strategy
    hashes, so ``serialize`` must be deterministic for a given value.
    """

    def serialize(self, value: Any) -> str:
        """Serialize value to text.

        Args:
            value: The Python object to serialize.

        Returns:
            The serialized text.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        ...

    def deserialize(self, data: str | bytes) -> Any:
        """Deserialize text to value.

        Args:
            data: The text (or UTF-8 bytes) to deserialize.

        Returns:
            The deserialized Python object.

        Raises:
            SerializationError: If the data cannot be deserialized.
        """
        ...
