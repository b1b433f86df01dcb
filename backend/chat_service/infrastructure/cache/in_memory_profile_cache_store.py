"""In-memory ProfileCacheStore. Entries are kept until invalidated."""

from chat_service.domain.entities.profile import ProfileCacheEntry, ProfileKey
from chat_service.domain.ports.profile_cache_store import ProfileCacheStore


class InMemoryProfileCacheStore(ProfileCacheStore):
    def __init__(self):
        self._entries: dict[ProfileKey, ProfileCacheEntry] = {}

    async def get_many(self, keys: list[ProfileKey]) -> dict[ProfileKey, ProfileCacheEntry]:
        return {key: self._entries[key] for key in keys if key in self._entries}

    async def put_many(self, entries: list[ProfileCacheEntry]) -> None:
        for entry in entries:
            self._entries[entry.key] = entry

    async def delete(self, keys: list[ProfileKey]) -> None:
        for key in keys:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
