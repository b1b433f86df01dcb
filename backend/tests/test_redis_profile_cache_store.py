import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from chat_service.domain.entities.profile import ProfileCacheEntry, ProfileKey
from chat_service.domain.exceptions import ExternalDependencyError
from chat_service.domain.value_objects import ProfileKind
from chat_service.infrastructure.cache import RedisProfileCacheStore


class FakePipeline:
    def __init__(self, redis):
        self._redis = redis
        self._ops = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def hgetall(self, key):
        self._ops.append(("hgetall", key))

    def hset(self, key, mapping):
        self._ops.append(("hset", key, mapping))

    def expire(self, key, seconds):
        self._ops.append(("expire", key, seconds))

    async def execute(self):
        if self._redis.down:
            raise RedisConnectionError("redis down")
        results = []
        for op in self._ops:
            if op[0] == "hgetall":
                results.append(dict(self._redis.hashes.get(op[1], {})))
            elif op[0] == "hset":
                self._redis.hashes.setdefault(op[1], {}).update(op[2])
                results.append(len(op[2]))
            else:
                self._redis.ttls[op[1]] = op[2]
                results.append(True)
        return results


class FakeRedis:
    """Just enough of redis.asyncio.Redis (decode_responses=True)."""

    def __init__(self):
        self.hashes: dict[str, dict[str, str]] = {}
        self.ttls: dict[str, int] = {}
        self.down = False

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    async def delete(self, *keys):
        if self.down:
            raise RedisConnectionError("redis down")
        return sum(1 for key in keys if self.hashes.pop(key, None) is not None)


def _entry(uuid="u1", kind=ProfileKind.USER, avatar_url=None):
    return ProfileCacheEntry(
        kind=kind, uuid=uuid, name="Asha", avatar_url=avatar_url, fetched_at=1700000000.5
    )


@pytest.mark.asyncio
async def test_entries_are_stored_as_hashes_with_retention_ttl():
    redis = FakeRedis()
    store = RedisProfileCacheStore(redis, ttl_seconds=86400, stale_retention_seconds=3600)

    await store.put_many([_entry(), _entry("b1", ProfileKind.BUSINESS, "https://img/b1")])

    assert redis.hashes["profile:user:u1"] == {
        "name": "Asha",
        "avatar_url": "",
        "fetched_at": "1700000000.5",
    }
    assert redis.ttls["profile:business:b1"] == 90000


@pytest.mark.asyncio
async def test_read_back_and_skip_missing_or_malformed():
    redis = FakeRedis()
    store = RedisProfileCacheStore(redis, ttl_seconds=60)
    await store.put_many([_entry("b1", ProfileKind.BUSINESS, "https://img/b1")])
    redis.hashes["profile:user:broken"] = {"name": "x"}

    business = ProfileKey(ProfileKind.BUSINESS, "b1")
    entries = await store.get_many(
        [business, ProfileKey(ProfileKind.USER, "nobody"), ProfileKey(ProfileKind.USER, "broken")]
    )

    assert list(entries) == [business]
    assert entries[business].avatar_url == "https://img/b1"
    assert entries[business].fetched_at == 1700000000.5


@pytest.mark.asyncio
async def test_delete_removes_keys():
    redis = FakeRedis()
    store = RedisProfileCacheStore(redis, ttl_seconds=60)
    await store.put_many([_entry()])

    await store.delete([ProfileKey(ProfileKind.USER, "u1")])

    assert redis.hashes == {}


@pytest.mark.asyncio
async def test_redis_failures_become_external_dependency_errors():
    redis = FakeRedis()
    redis.down = True
    store = RedisProfileCacheStore(redis, ttl_seconds=60)

    with pytest.raises(ExternalDependencyError):
        await store.get_many([ProfileKey(ProfileKind.USER, "u1")])
    with pytest.raises(ExternalDependencyError):
        await store.put_many([_entry()])
    with pytest.raises(ExternalDependencyError):
        await store.delete([ProfileKey(ProfileKind.USER, "u1")])
