"""
Cache Layer - profile cache stores.

InMemoryProfileCacheStore is the default; RedisProfileCacheStore is used when
PROFILE_CACHE_BACKEND=redis.
"""

from chat_service.infrastructure.cache.in_memory_profile_cache_store import (
    InMemoryProfileCacheStore,
)
from chat_service.infrastructure.cache.redis_profile_cache_store import (
    RedisProfileCacheStore,
)
from chat_service.infrastructure.cache.redis_client import (
    close_redis_client,
    create_redis_client,
)

__all__ = [
    "InMemoryProfileCacheStore",
    "RedisProfileCacheStore",
    "close_redis_client",
    "create_redis_client",
]
