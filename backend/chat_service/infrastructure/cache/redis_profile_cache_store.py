"""
Redis ProfileCacheStore.

Redis Data Structure (HASH):
- Key pattern: "profile:{kind}:{uuid}"  (kind = user | business)
- Fields: name, avatar_url ("" when absent), fetched_at (epoch seconds)
- Key TTL: ttl + stale retention. Freshness is decided by ProfileCache from
  fetched_at; the longer key TTL keeps expired copies available as the
  stale fallback when the identity service is down.

Redis failures are raised as ExternalDependencyError; ProfileCache treats a
failed read as a miss and a failed write as a no-op.
"""

import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

from chat_service.domain.entities.profile import ProfileCacheEntry, ProfileKey
from chat_service.domain.exceptions import ExternalDependencyError
from chat_service.domain.ports.profile_cache_store import ProfileCacheStore

logger = logging.getLogger(__name__)


class RedisProfileCacheStore(ProfileCacheStore):
    KEY_PREFIX = "profile"

    def __init__(self, redis: Redis, ttl_seconds: int, stale_retention_seconds: int = 0):
        self._redis = redis
        self._key_ttl = int(ttl_seconds + stale_retention_seconds)

    def _cache_key(self, key: ProfileKey) -> str:
        return f"{self.KEY_PREFIX}:{key.kind.value}:{key.uuid}"

    async def get_many(self, keys: list[ProfileKey]) -> dict[ProfileKey, ProfileCacheEntry]:
        if not keys:
            return {}
        try:
            async with self._redis.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.hgetall(self._cache_key(key))
                rows = await pipe.execute()
        except RedisError as e:
            raise ExternalDependencyError(f"Redis read failed: {e}") from e

        entries = {}
        for key, row in zip(keys, rows):
            if not row:
                continue
            try:
                entries[key] = ProfileCacheEntry(
                    kind=key.kind,
                    uuid=key.uuid,
                    name=row["name"],
                    avatar_url=row.get("avatar_url") or None,
                    fetched_at=float(row["fetched_at"]),
                )
            except (KeyError, ValueError):
                logger.warning(f"[Redis] Ignoring malformed profile entry {self._cache_key(key)}")
        return entries

    async def put_many(self, entries: list[ProfileCacheEntry]) -> None:
        if not entries:
            return
        try:
            async with self._redis.pipeline(transaction=False) as pipe:
                for entry in entries:
                    cache_key = self._cache_key(entry.key)
                    pipe.hset(
                        cache_key,
                        mapping={
                            "name": entry.name,
                            "avatar_url": entry.avatar_url or "",
                            "fetched_at": str(entry.fetched_at),
                        },
                    )
                    pipe.expire(cache_key, self._key_ttl)
                await pipe.execute()
        except RedisError as e:
            raise ExternalDependencyError(f"Redis write failed: {e}") from e

    async def delete(self, keys: list[ProfileKey]) -> None:
        if not keys:
            return
        try:
            await self._redis.delete(*(self._cache_key(key) for key in keys))
        except RedisError as e:
            raise ExternalDependencyError(f"Redis delete failed: {e}") from e
