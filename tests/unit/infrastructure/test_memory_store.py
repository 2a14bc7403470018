"""Tests for InMemoryCacheStore."""

import pytest

from proxyql.infrastructure.backends.memory import InMemoryCacheStore


class TestScalarEntries:
    """Tests for get/set/delete."""

    @pytest.mark.asyncio
    async def test_set_and_get(self, store: InMemoryCacheStore) -> None:
        """Test basic set and get operations."""
        await store.set("key1", {"x": 1}, 60)
        assert await store.get("key1") == {"x": 1}

    @pytest.mark.asyncio
    async def test_get_missing_key(self, store: InMemoryCacheStore) -> None:
        """Test getting a missing key returns None."""
        assert await store.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_set_returns_store(self, store: InMemoryCacheStore) -> None:
        """Test that set returns the store."""
        assert await store.set("key1", 1) is store

    @pytest.mark.asyncio
    async def test_overwrite(self, store: InMemoryCacheStore) -> None:
        """Test overwriting an entry."""
        await store.set("key1", {"x": 1}, 60)
        await store.set("key1", {"x": 2}, 60)
        assert await store.get("key1") == {"x": 2}

    @pytest.mark.asyncio
    async def test_values_are_copied(self, store: InMemoryCacheStore) -> None:
        """Stored and returned values are copies."""
        value = {"items": [1, 2]}
        await store.set("key1", value)
        value["items"].append(3)

        cached = await store.get("key1")
        cached["items"].append(4)

        assert await store.get("key1") == {"items": [1, 2]}

    @pytest.mark.asyncio
    async def test_expiry(self, store: InMemoryCacheStore, clock) -> None:
        """Each entry expires after its own TTL."""
        await store.set("short", "a", 10)
        await store.set("long", "b", 100)

        clock.advance(11)

        assert await store.get("short") is None
        assert await store.get("long") == "b"

    @pytest.mark.asyncio
    async def test_zero_ttl_never_expires(self, store: InMemoryCacheStore, clock) -> None:
        """A zero ttl without default never expires."""
        await store.set("key1", "a", 0)
        clock.advance(10**9)
        assert await store.get("key1") == "a"

    @pytest.mark.asyncio
    async def test_zero_ttl_uses_default(self, clock) -> None:
        """A zero ttl falls back to the default ttl."""
        store = InMemoryCacheStore(default_ttl=5, timer=clock)
        await store.set("key1", "a", 0)
        clock.advance(6)
        assert await store.get("key1") is None

    @pytest.mark.asyncio
    async def test_delete(self, store: InMemoryCacheStore) -> None:
        """Test deleting a key."""
        await store.set("key1", "value1")

        assert await store.delete("key1") is True
        assert await store.get("key1") is None
        assert await store.delete("key1") is False

    @pytest.mark.asyncio
    async def test_delete_expired(self, store: InMemoryCacheStore, clock) -> None:
        """Test deleting an expired key."""
        await store.set("key1", "value1", 10)
        clock.advance(11)
        assert await store.delete("key1") is False

    @pytest.mark.asyncio
    async def test_clear(self, store: InMemoryCacheStore) -> None:
        """Test clearing the store."""
        await store.set("key1", "value1")
        await store.hset("key2", "field", "value2")

        await store.clear()

        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_lru_eviction(self, clock) -> None:
        """Test LRU eviction when maxsize is reached."""
        store = InMemoryCacheStore(maxsize=3, timer=clock)

        await store.set("key1", "value1")
        await store.set("key2", "value2")
        await store.set("key3", "value3")

        # Access key1 to make it recently used
        await store.get("key1")

        # Add key4, should evict key2 (least recently used)
        await store.set("key4", "value4")

        assert await store.get("key1") == "value1"
        assert await store.get("key2") is None
        assert await store.get("key3") == "value3"
        assert await store.get("key4") == "value4"


class TestHashRecords:
    """Tests for hget/hset."""

    @pytest.mark.asyncio
    async def test_fields_accumulate(self, store: InMemoryCacheStore) -> None:
        """Test that hash fields accumulate."""
        await store.hset("h", "lastRequested", "2024-01-01T00:00:00.000Z", 60)
        await store.hset("h", "response", '{"x":1}', 60)

        assert await store.hget("h") == {
            "lastRequested": "2024-01-01T00:00:00.000Z",
            "response": '{"x":1}',
        }

    @pytest.mark.asyncio
    async def test_field_overwrite(self, store: InMemoryCacheStore) -> None:
        """Test overwriting a hash field."""
        await store.hset("h", "f", "1")
        await store.hset("h", "f", "2")
        assert await store.hget("h") == {"f": "2"}

    @pytest.mark.asyncio
    async def test_missing_record(self, store: InMemoryCacheStore) -> None:
        """Test reading a missing hash record."""
        assert await store.hget("h") is None

    @pytest.mark.asyncio
    async def test_hset_refreshes_expiry(self, store: InMemoryCacheStore, clock) -> None:
        """Every field write extends the whole record."""
        await store.hset("h", "response", "r", 10)
        clock.advance(8)
        await store.hset("h", "lastRequested", "t", 10)
        clock.advance(8)

        assert await store.hget("h") == {"response": "r", "lastRequested": "t"}

        clock.advance(3)
        assert await store.hget("h") is None

    @pytest.mark.asyncio
    async def test_kinds_do_not_mix(self, store: InMemoryCacheStore) -> None:
        """A scalar key reads as absent through hget, and vice versa."""
        await store.set("scalar", {"x": 1})
        await store.hset("hash", "f", "v")

        assert await store.hget("scalar") is None
        assert await store.get("hash") is None

    @pytest.mark.asyncio
    async def test_returned_map_is_a_copy(self, store: InMemoryCacheStore) -> None:
        """Test that hget returns a copy."""
        await store.hset("h", "f", "v")
        (await store.hget("h"))["g"] = "w"
        assert await store.hget("h") == {"f": "v"}


class TestProperties:
    """Tests for size properties."""

    def test_len(self) -> None:
        """Test the entry count."""
        assert len(InMemoryCacheStore(maxsize=100)) == 0

    @pytest.mark.parametrize("default_ttl", [0, -5])
    def test_non_positive_default_ttl_rejected(self, default_ttl: float) -> None:
        """Test that a non-positive default ttl is rejected."""
        with pytest.raises(ValueError):
            InMemoryCacheStore(default_ttl=default_ttl)

    def test_maxsize_property(self) -> None:
        """Test the maxsize property."""
        assert InMemoryCacheStore(maxsize=500).maxsize == 500
