import asyncio

import pytest

from chat_service.application.services import ProfileCache
from chat_service.domain.entities.profile import ProfileCacheEntry, ProfileKey
from chat_service.domain.exceptions import ExternalDependencyError
from chat_service.domain.ports.profile_cache_store import ProfileCacheStore
from chat_service.domain.value_objects import ProfileKind
from chat_service.infrastructure.cache import InMemoryProfileCacheStore

DAY = 86400


class UnavailableStore(ProfileCacheStore):
    async def get_many(self, keys):
        raise ExternalDependencyError("cache down")

    async def put_many(self, entries):
        raise ExternalDependencyError("cache down")

    async def delete(self, keys):
        raise ExternalDependencyError("cache down")


@pytest.mark.asyncio
async def test_fresh_entry_is_served_without_a_fetch(profile_cache, directory, clock):
    directory.names = {"u1": "Asha"}

    first = await profile_cache.get_user_profile("u1")
    clock.advance(DAY - 1)
    second = await profile_cache.get_user_profile("u1")

    assert first.name == second.name == "Asha"
    assert len(directory.calls) == 1


@pytest.mark.asyncio
async def test_expired_entry_triggers_exactly_one_refetch(profile_cache, directory, clock):
    directory.names = {"u1": "Asha"}
    await profile_cache.get_user_profile("u1")

    directory.names["u1"] = "Asha R."
    clock.advance(DAY)
    refreshed = await profile_cache.get_user_profile("u1")
    again = await profile_cache.get_user_profile("u1")

    assert refreshed.name == again.name == "Asha R."
    assert len(directory.calls) == 2


@pytest.mark.asyncio
async def test_misses_go_out_in_one_batch(profile_cache, directory):
    directory.names = {"u1": "Asha", "u2": "Bibek", "b1": "Momo House"}
    await profile_cache.get_user_profile("u1")

    batch = await profile_cache.batch_fetch(["u1", "u2"], ["b1"])

    assert directory.calls[-1] == (["u2"], ["b1"])
    assert batch.users["u2"].name == "Bibek"
    assert batch.businesses["b1"].name == "Momo House"
    assert batch.get(ProfileKey(ProfileKind.USER, "u1")).name == "Asha"


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_request(profile_cache, directory):
    directory.names = {"u1": "Asha", "u2": "Bibek"}
    directory.gate = asyncio.Event()

    callers = [
        asyncio.ensure_future(profile_cache.batch_fetch(["u1", "u2"])) for _ in range(5)
    ]
    for _ in range(3):
        await asyncio.sleep(0)
    assert profile_cache.in_flight_count == 1

    directory.gate.set()
    batches = await asyncio.gather(*callers)

    assert len(directory.calls) == 1
    assert all(b.users["u2"].name == "Bibek" for b in batches)
    assert profile_cache.in_flight_count == 0


@pytest.mark.asyncio
async def test_partially_overlapping_caller_fetches_only_the_remainder(
    profile_cache, directory
):
    directory.names = {"u1": "Asha", "u2": "Bibek", "u3": "Chandra"}
    directory.gate = asyncio.Event()

    first = asyncio.ensure_future(profile_cache.batch_fetch(["u1", "u2"]))
    await asyncio.sleep(0)
    second = asyncio.ensure_future(profile_cache.batch_fetch(["u2", "u3"]))
    for _ in range(3):
        await asyncio.sleep(0)

    directory.gate.set()
    one, two = await asyncio.gather(first, second)

    assert sorted(directory.calls) == [(["u1", "u2"], []), (["u3"], [])]
    assert two.users["u2"].name == one.users["u2"].name == "Bibek"
    assert two.users["u3"].name == "Chandra"


@pytest.mark.asyncio
async def test_failed_fetch_serves_stale_value(profile_cache, directory, clock):
    directory.names = {"u1": "Asha"}
    await profile_cache.get_user_profile("u1")

    clock.advance(DAY * 2)
    directory.fail = True
    profile = await profile_cache.get_user_profile("u1")

    assert profile.name == "Asha"
    assert profile.is_stale
    assert not profile.is_placeholder


@pytest.mark.asyncio
async def test_failed_fetch_without_history_gives_placeholder(profile_cache, directory):
    directory.fail = True

    batch = await profile_cache.batch_fetch(["u1"], ["b1"])

    assert batch.users["u1"].is_placeholder
    assert batch.users["u1"].name == "Unknown user"
    assert batch.businesses["b1"].name == "Unknown business"


@pytest.mark.asyncio
async def test_slow_identity_service_times_out_to_placeholder(profile_cache, directory):
    directory.names = {"u1": "Asha"}
    directory.delay = 2.0

    profile = await profile_cache.get_user_profile("u1")

    assert profile.is_placeholder
    assert profile_cache.in_flight_count == 0


@pytest.mark.asyncio
async def test_uuid_missing_from_response_is_placeholder(profile_cache, directory):
    directory.names = {"u1": "Asha"}

    batch = await profile_cache.batch_fetch(["u1", "ghost"])

    assert batch.users["u1"].name == "Asha"
    assert batch.users["ghost"].is_placeholder


@pytest.mark.asyncio
async def test_invalidate_forces_refetch(profile_cache, directory):
    directory.names = {"u1": "Asha"}
    await profile_cache.get_user_profile("u1")

    await profile_cache.invalidate(user_uuids=["u1"])
    await profile_cache.get_user_profile("u1")

    assert len(directory.calls) == 2


@pytest.mark.asyncio
async def test_entries_are_stamped_with_fetch_time(directory, clock):
    store = InMemoryProfileCacheStore()
    cache = ProfileCache(directory, store, ttl_seconds=DAY, fetch_timeout=0.5, clock=clock)
    directory.names = {"b1": "Momo House"}

    await cache.get_business_profile("b1")

    entries = await store.get_many([ProfileKey(ProfileKind.BUSINESS, "b1")])
    entry = entries[ProfileKey(ProfileKind.BUSINESS, "b1")]
    assert isinstance(entry, ProfileCacheEntry)
    assert entry.fetched_at == clock()
    assert len(store) == 1


@pytest.mark.asyncio
async def test_unavailable_store_degrades_to_direct_fetch(directory, clock):
    cache = ProfileCache(
        directory, UnavailableStore(), ttl_seconds=DAY, fetch_timeout=0.5, clock=clock
    )
    directory.names = {"u1": "Asha"}

    profile = await cache.get_user_profile("u1")
    await cache.invalidate(user_uuids=["u1"])

    assert profile.name == "Asha"
    assert len(directory.calls) == 1


@pytest.mark.asyncio
async def test_empty_request_makes_no_call(profile_cache, directory):
    batch = await profile_cache.batch_fetch([], [""])

    assert batch.users == {} and batch.businesses == {}
    assert directory.calls == []
