"""
Profile Cache Store Port - where ProfileCache keeps its entries.

The store never decides freshness; it returns whatever it holds (expired
entries included) so the cache can fall back to stale data.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from chat_service.domain.entities.profile import ProfileCacheEntry, ProfileKey


class ProfileCacheStore(ABC):
    @abstractmethod
    async def get_many(
        self, keys: Iterable[ProfileKey]
    ) -> dict[ProfileKey, ProfileCacheEntry]: ...

    @abstractmethod
    async def put_many(self, entries: list[ProfileCacheEntry]) -> None: ...

    @abstractmethod
    async def delete(self, keys: Iterable[ProfileKey]) -> None: ...
