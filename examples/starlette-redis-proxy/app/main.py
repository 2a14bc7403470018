"""Starlette + Redis proxyql example.

Proxies GraphQL requests to ``UPSTREAM_URL`` and caches responses in Redis.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from proxyql import ProxyCacheConfig
from proxyql.adapters.starlette import CachingProxy, ProxyConfig
from proxyql.infrastructure.backends.redis import RedisCacheStore

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")
UPSTREAM_URL = os.getenv("UPSTREAM_URL", "http://localhost:4000/graphql")
CACHE_TIMEOUT = int(os.getenv("CACHE_TIMEOUT", "300"))

logging.basicConfig(level=logging.INFO)

cache_store = RedisCacheStore(redis_url=REDIS_URL, key_prefix="proxyql:example")


def tenant_key(cache_id: str, request: Any) -> str:
    """Scope directive entries per tenant."""
    tenant = request.headers.get("X-Tenant", "public")
    return f"{tenant}:{cache_id}"


cache_config = ProxyCacheConfig(
    global_timeout=CACHE_TIMEOUT,
    cache_bypass_header="X-No-Cache",
    key_modifier=tenant_key,
)

proxy = CachingProxy.create(
    cache_store,
    ProxyConfig(upstream_url=UPSTREAM_URL),
    cache_config,
)


@asynccontextmanager
async def lifespan(app: Starlette):
    print(f"[STARTUP] Proxying {UPSTREAM_URL}, caching in {REDIS_URL}")
    yield
    print("[SHUTDOWN] Closing upstream client and Redis connection")
    await proxy.aclose()
    await cache_store.close()


async def health_check(request: Request) -> JSONResponse:
    try:
        await cache_store._redis.ping()
        redis_status = "healthy"
    except Exception as e:
        redis_status = f"unhealthy: {e}"

    return JSONResponse(
        {
            "status": "healthy",
            "redis": redis_status,
            "cache_enabled": cache_config.enabled,
        }
    )


async def cache_stats(request: Request) -> JSONResponse:
    return JSONResponse(
        {
            "stats": proxy.cache_stats,
            "config": {
                "enabled": cache_config.enabled,
                "global_timeout": cache_config.global_timeout,
                "cache_bypass_header": cache_config.cache_bypass_header,
            },
        }
    )


app = Starlette(
    routes=[
        Route("/health", health_check),
        Route("/cache/stats", cache_stats),
        Mount("/graphql", app=proxy),
    ],
    lifespan=lifespan,
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
