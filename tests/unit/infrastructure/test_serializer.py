"""Tests for JsonSerializer."""

import pytest

from proxyql.infrastructure.serializers.json import JsonSerializer, SerializationError


class TestJsonSerializer:
    """Tests for JsonSerializer."""

    @pytest.fixture
    def serializer(self) -> JsonSerializer:
        """Create a serializer for testing."""
        return JsonSerializer()

    def test_compact_output(self, serializer: JsonSerializer) -> None:
        """Output has no whitespace between tokens."""
        value = {"query": "{ x }", "variables": {"a": [1, 2]}}
        assert serializer.serialize(value) == '{"query":"{ x }","variables":{"a":[1,2]}}'

    def test_preserves_key_order(self, serializer: JsonSerializer) -> None:
        """Test that key order is preserved."""
        assert serializer.serialize({"b": 1, "a": 2}) == '{"b":1,"a":2}'

    def test_keeps_non_ascii(self, serializer: JsonSerializer) -> None:
        """Test that non-ASCII text is kept."""
        assert serializer.serialize({"name": "Zoë"}) == '{"name":"Zoë"}'

    def test_deserialize_text_and_bytes(self, serializer: JsonSerializer) -> None:
        """Test deserializing text and bytes."""
        assert serializer.deserialize('{"x":1}') == {"x": 1}
        assert serializer.deserialize('{"x":"é"}'.encode()) == {"x": "é"}

    def test_serialize_error(self, serializer: JsonSerializer) -> None:
        """Test serialization error for non-serializable objects."""
        with pytest.raises(SerializationError):
            serializer.serialize({"value": object()})

    def test_deserialize_error(self, serializer: JsonSerializer) -> None:
        """Test deserialization error for invalid data."""
        with pytest.raises(SerializationError):
            serializer.deserialize(b"not valid json")

    def test_deserialize_invalid_encoding(self) -> None:
        """Test deserializing bytes in the wrong encoding."""
        serializer = JsonSerializer(encoding="ascii")
        with pytest.raises(SerializationError):
            serializer.deserialize('"é"'.encode())
