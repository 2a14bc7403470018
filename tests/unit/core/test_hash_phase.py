"""Tests for HashPhase."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from proxyql import (
    CacheLookupError,
    GetPhaseError,
    InMemoryCacheStore,
    JsonSerializer,
    ProxyCacheConfig,
    ProxyRequest,
    RequestCacheState,
)
from proxyql.core.services.hash_phase import (
    LAST_REQUESTED_FIELD,
    RESPONSE_FIELD,
    HashPhase,
)
from proxyql.core.services.key_derivation import hash_request_body

QUERY = "query { x(y: 1) }"


@pytest.fixture
def config() -> ProxyCacheConfig:
    return ProxyCacheConfig(global_timeout=120, cache_bypass_header="X-No-Cache")


@pytest.fixture
def phase(store: InMemoryCacheStore, config: ProxyCacheConfig) -> HashPhase:
    return HashPhase(store, JsonSerializer(), config)


def _hash(request: ProxyRequest) -> str:
    return hash_request_body(request.body, JsonSerializer())


class TestPassthrough:
    """Requests the hash strategy ignores."""

    @pytest.mark.asyncio
    async def test_no_body(self, phase: HashPhase) -> None:
        """Test a request without a body."""
        result = await phase.run(ProxyRequest(body=None, method="GET"), RequestCacheState())
        assert result.state.body_hash is None

    @pytest.mark.asyncio
    async def test_no_query(self, phase: HashPhase, make_request, store) -> None:
        """Test a body without a query."""
        request = make_request(variables={"a": 1})
        result = await phase.run(request, RequestCacheState())
        assert result.state.body_hash is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_bypass_header(
        self, phase: HashPhase, store: InMemoryCacheStore, make_request
    ) -> None:
        """A present bypass header disables the phase, even with a stored response."""
        request = make_request(query=QUERY, headers={"x-no-cache": "1"})
        await store.hset(_hash(request), RESPONSE_FIELD, json.dumps({"x": 1}))

        result = await phase.run(request, RequestCacheState())

        assert result.hit is None
        assert result.state.body_hash is None

    @pytest.mark.asyncio
    async def test_bypass_header_not_configured(self, store, make_request) -> None:
        """The header has no effect unless configured."""
        phase = HashPhase(store, JsonSerializer(), ProxyCacheConfig())
        request = make_request(query=QUERY, headers={"x-no-cache": "1"})

        result = await phase.run(request, RequestCacheState())

        assert result.state.body_hash == _hash(request)


class TestLookup:
    """Tests for hits and misses."""

    @pytest.mark.asyncio
    async def test_miss_marks_hash_and_touches_record(
        self, phase: HashPhase, store: InMemoryCacheStore, make_request
    ) -> None:
        """A miss records the hash and touches lastRequested."""
        request = make_request(query=QUERY)

        result = await phase.run(request, RequestCacheState())

        body_hash = _hash(request)
        assert result.hit is None
        assert result.error is None
        assert result.state.body_hash == body_hash
        record = await store.hget(body_hash)
        assert set(record) == {LAST_REQUESTED_FIELD}
        assert record[LAST_REQUESTED_FIELD].endswith("Z")

    @pytest.mark.asyncio
    async def test_hit(self, phase: HashPhase, store: InMemoryCacheStore, make_request) -> None:
        """Test a cache hit."""
        request = make_request(query=QUERY)
        body_hash = _hash(request)
        await store.hset(body_hash, RESPONSE_FIELD, '{"x":1}', 120)

        result = await phase.run(request, RequestCacheState())

        assert result.hit.envelope == {"data": {"x": 1}}
        assert result.hit.headers == {
            "X-Proxy-Cached": "true",
            "X-Proxy-Hash": body_hash,
        }
        assert result.state.body_hash == body_hash
        assert LAST_REQUESTED_FIELD in await store.hget(body_hash)

    @pytest.mark.asyncio
    async def test_keeps_directive_state(self, phase: HashPhase, make_request) -> None:
        """Test that the pending directive is kept."""
        from proxyql import PendingDirective

        state = RequestCacheState(directive=PendingDirective(id="abc", timeout=60))
        result = await phase.run(make_request(query=QUERY), state)
        assert result.state.directive == PendingDirective(id="abc", timeout=60)
        assert result.state.body_hash is not None

    @pytest.mark.asyncio
    async def test_record_expires_with_global_timeout(
        self, phase: HashPhase, store: InMemoryCacheStore, clock, make_request
    ) -> None:
        """Hash records expire after the global timeout."""
        request = make_request(query=QUERY)
        await phase.run(request, RequestCacheState())

        clock.advance(121)

        assert await store.hget(_hash(request)) is None


class TestFailOpen:
    """Failures are returned, never raised."""

    @pytest.mark.asyncio
    async def test_store_failure_keeps_hash(self, config, make_request) -> None:
        """A store failure keeps the computed hash."""
        store = MagicMock()
        store.hset = AsyncMock(side_effect=TimeoutError("slow store"))
        store.hget = AsyncMock(return_value=None)
        phase = HashPhase(store, JsonSerializer(), config)
        request = make_request(query=QUERY)

        result = await phase.run(request, RequestCacheState())

        assert isinstance(result.error, CacheLookupError)
        assert result.hit is None
        assert result.state.body_hash == _hash(request)

    @pytest.mark.asyncio
    async def test_corrupt_cached_response(
        self, phase: HashPhase, store: InMemoryCacheStore, make_request
    ) -> None:
        """Test a cached response that cannot be decoded."""
        request = make_request(query=QUERY)
        await store.hset(_hash(request), RESPONSE_FIELD, "{not json")

        result = await phase.run(request, RequestCacheState())

        assert isinstance(result.error, GetPhaseError)
        assert result.hit is None

    @pytest.mark.asyncio
    async def test_unserializable_body(self, phase: HashPhase) -> None:
        """Test a body that cannot be serialized."""
        request = ProxyRequest(body={"query": QUERY, "variables": {"s": {1, 2}}})

        result = await phase.run(request, RequestCacheState())

        assert isinstance(result.error, GetPhaseError)
        assert result.state.body_hash is None
