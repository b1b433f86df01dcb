"""
ProfileCache - read-through cache of display profiles from the identity service.

Lookup order for every requested uuid:
1. Fresh cache entry (fetched less than ttl seconds ago) → served directly
2. Otherwise it is a miss; all misses of one call go out in ONE batch request
3. Fetch failed or timed out → last cached value marked stale, else a placeholder
4. Fetch succeeded but uuid absent from the response → placeholder

Concurrent callers whose misses overlap share the in-flight request instead of
issuing their own. The in-flight map is only touched between awaits, so on a
single event loop checking for pending work and registering new work is one
indivisible step.

Profile data is display-only. Nothing here ever raises to the caller because
the identity service is unavailable.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Iterable, Optional

from chat_service.domain.entities.profile import Profile, ProfileCacheEntry, ProfileKey
from chat_service.domain.exceptions import ExternalDependencyError
from chat_service.domain.ports.profile_cache_store import ProfileCacheStore
from chat_service.domain.ports.profile_directory import ProfileDirectory
from chat_service.domain.value_objects.profile_kind import ProfileKind

logger = logging.getLogger(__name__)

# Marks keys whose batch request failed
_FETCH_FAILED = object()


@dataclass
class ProfileBatch:
    users: dict[str, Profile] = field(default_factory=dict)
    businesses: dict[str, Profile] = field(default_factory=dict)

    def get(self, key: ProfileKey) -> Optional[Profile]:
        bucket = self.users if key.kind is ProfileKind.USER else self.businesses
        return bucket.get(key.uuid)


class ProfileCache:
    def __init__(
        self,
        directory: ProfileDirectory,
        store: ProfileCacheStore,
        ttl_seconds: float,
        fetch_timeout: float,
        clock: Callable[[], float] = time.time,
    ):
        self._directory = directory
        self._store = store
        self._ttl = ttl_seconds
        self._fetch_timeout = fetch_timeout
        self._clock = clock
        # miss set -> task fetching exactly that set
        self._in_flight: dict[frozenset[ProfileKey], asyncio.Task] = {}
        # key -> the miss set whose task will resolve it
        self._pending: dict[ProfileKey, frozenset[ProfileKey]] = {}

    async def batch_fetch(
        self,
        user_uuids: Iterable[str] = (),
        business_uuids: Iterable[str] = (),
    ) -> ProfileBatch:
        keys = {ProfileKey(ProfileKind.USER, u) for u in user_uuids if u}
        keys |= {ProfileKey(ProfileKind.BUSINESS, b) for b in business_uuids if b}
        if not keys:
            return ProfileBatch()

        cached = await self._read_store(keys)
        now = self._clock()

        resolved: dict[ProfileKey, Profile] = {}
        misses: set[ProfileKey] = set()
        for key in keys:
            entry = cached.get(key)
            if entry is not None and entry.is_fresh(now, self._ttl):
                resolved[key] = entry.to_profile()
            else:
                misses.add(key)

        if misses:
            logger.debug(
                f"[ProfileCache] {len(resolved)} hits, {len(misses)} misses"
            )
            outcomes = await self._resolve_misses(misses)
            for key, outcome in outcomes.items():
                if outcome is _FETCH_FAILED:
                    entry = cached.get(key)
                    resolved[key] = (
                        entry.to_profile(stale=True)
                        if entry is not None
                        else Profile.placeholder(key)
                    )
                elif outcome is None:
                    resolved[key] = Profile.placeholder(key)
                else:
                    resolved[key] = outcome

        batch = ProfileBatch()
        for key, profile in resolved.items():
            if key.kind is ProfileKind.USER:
                batch.users[key.uuid] = profile
            else:
                batch.businesses[key.uuid] = profile
        return batch

    async def get_user_profile(self, user_uuid: str) -> Profile:
        batch = await self.batch_fetch(user_uuids=[user_uuid])
        return batch.users[user_uuid]

    async def get_business_profile(self, business_uuid: str) -> Profile:
        batch = await self.batch_fetch(business_uuids=[business_uuid])
        return batch.businesses[business_uuid]

    async def invalidate(
        self,
        user_uuids: Iterable[str] = (),
        business_uuids: Iterable[str] = (),
    ) -> None:
        """Drop cached entries so the next lookup goes to the identity service."""
        keys = [ProfileKey(ProfileKind.USER, u) for u in user_uuids]
        keys += [ProfileKey(ProfileKind.BUSINESS, b) for b in business_uuids]
        if not keys:
            return
        try:
            await self._store.delete(keys)
        except ExternalDependencyError as e:
            logger.warning(f"[ProfileCache] Invalidate failed: {e.message}")

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    async def _resolve_misses(self, misses: set[ProfileKey]) -> dict[ProfileKey, object]:
        waiting: dict[asyncio.Task, set[ProfileKey]] = {}
        unclaimed: set[ProfileKey] = set()

        # No awaits from here until every task is registered
        for key in misses:
            miss_set = self._pending.get(key)
            if miss_set is not None:
                task = self._in_flight[miss_set]
                waiting.setdefault(task, set()).add(key)
            else:
                unclaimed.add(key)

        if unclaimed:
            miss_set = frozenset(unclaimed)
            task = asyncio.ensure_future(self._fetch_and_store(miss_set))
            self._in_flight[miss_set] = task
            for key in miss_set:
                self._pending[key] = miss_set
            task.add_done_callback(partial(self._forget, miss_set))
            waiting[task] = set(unclaimed)
        else:
            logger.debug(f"[ProfileCache] Joined {len(waiting)} in-flight fetch(es)")

        outcomes: dict[ProfileKey, object] = {}
        for task, wanted in waiting.items():
            try:
                fetched = await asyncio.shield(task)
            except ExternalDependencyError as e:
                logger.warning(f"[ProfileCache] Falling back for {len(wanted)} profiles: {e.message}")
                for key in wanted:
                    outcomes[key] = _FETCH_FAILED
                continue
            for key in wanted:
                outcomes[key] = fetched.get(key)
        return outcomes

    async def _fetch_and_store(
        self, miss_set: frozenset[ProfileKey]
    ) -> dict[ProfileKey, Profile]:
        users = sorted(k.uuid for k in miss_set if k.kind is ProfileKind.USER)
        businesses = sorted(k.uuid for k in miss_set if k.kind is ProfileKind.BUSINESS)
        try:
            fetched = await asyncio.wait_for(
                self._directory.batch_fetch(users, businesses),
                timeout=self._fetch_timeout,
            )
        except asyncio.TimeoutError as e:
            raise ExternalDependencyError(
                f"Profile fetch timed out after {self._fetch_timeout}s"
            ) from e
        except ExternalDependencyError:
            raise
        except Exception as e:
            raise ExternalDependencyError(f"Profile fetch failed: {e}") from e

        fetched_at = self._clock()
        profiles = {key: profile for key, profile in fetched.items() if key in miss_set}
        entries = [
            ProfileCacheEntry(
                kind=key.kind,
                uuid=key.uuid,
                name=profile.name,
                avatar_url=profile.avatar_url,
                fetched_at=fetched_at,
            )
            for key, profile in profiles.items()
        ]
        if entries:
            try:
                await self._store.put_many(entries)
            except ExternalDependencyError as e:
                logger.warning(f"[ProfileCache] Cache write failed: {e.message}")
        logger.info(
            f"[ProfileCache] Fetched {len(profiles)}/{len(miss_set)} profiles from identity service"
        )
        return profiles

    async def _read_store(
        self, keys: set[ProfileKey]
    ) -> dict[ProfileKey, ProfileCacheEntry]:
        try:
            return await self._store.get_many(list(keys))
        except ExternalDependencyError as e:
            logger.warning(f"[ProfileCache] Cache read failed, treating as miss: {e.message}")
            return {}

    def _forget(self, miss_set: frozenset[ProfileKey], task: asyncio.Task) -> None:
        self._in_flight.pop(miss_set, None)
        for key in miss_set:
            if self._pending.get(key) is miss_set:
                del self._pending[key]
        if not task.cancelled():
            # Mark the exception as retrieved; waiters already handled it
            task.exception()
