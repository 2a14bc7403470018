"""Pytest configuration for proxyql tests."""

from collections.abc import Callable
from typing import Any

import pytest

from proxyql import InMemoryCacheStore, ProxyRequest


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """A clock starting at a fixed time."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryCacheStore:
    """An empty in-memory store driven by the fake clock."""
    return InMemoryCacheStore(maxsize=100, timer=clock)


@pytest.fixture
def make_request() -> Callable[..., ProxyRequest]:
    """Factory for GraphQL requests."""

    def factory(
        query: str | None = None,
        variables: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        context: Any = None,
        method: str = "POST",
    ) -> ProxyRequest:
        body: dict[str, Any] = {}
        if query is not None:
            body["query"] = query
        if variables is not None:
            body["variables"] = variables
        return ProxyRequest(
            body=body,
            headers={k.lower(): v for k, v in (headers or {}).items()},
            method=method,
            context=context,
        )

    return factory
