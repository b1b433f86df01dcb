"""
Async Redis client for the profile cache store.

One pooled client per process, created by the DI container when
PROFILE_CACHE_BACKEND=redis and closed with the container.
"""

import logging
from urllib.parse import urlsplit

import redis.asyncio as redis
from redis.asyncio import Redis

logger = logging.getLogger(__name__)


def _safe_url(url: str) -> str:
    parts = urlsplit(url)
    host = parts.hostname or ""
    port = f":{parts.port}" if parts.port else ""
    return f"{parts.scheme}://{host}{port}{parts.path}"


async def create_redis_client(url: str, timeout: float = 5.0) -> Redis:
    """
    Connect and ping before handing the client out, so a bad REDIS_URL fails
    at startup rather than on the first profile lookup.

    Raises:
        redis.ConnectionError: If Redis is not reachable
    """
    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    await client.ping()
    logger.info(f"[Redis] Connected to {_safe_url(url)}")
    return client


async def close_redis_client(client: Redis) -> None:
    await client.aclose()
    logger.info("[Redis] Connection closed")
