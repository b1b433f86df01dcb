"""
Profile types - display data owned by the external identity service.

ProfileCacheEntry is what the cache stores; Profile is what callers receive.
A Profile is never authoritative: it may be stale or a placeholder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from chat_service.domain.value_objects.profile_kind import ProfileKind

PLACEHOLDER_NAMES = {
    ProfileKind.USER: "Unknown user",
    ProfileKind.BUSINESS: "Unknown business",
}


@dataclass(frozen=True)
class ProfileKey:
    kind: ProfileKind
    uuid: str

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.uuid}"


@dataclass(frozen=True)
class Profile:
    uuid: str
    kind: ProfileKind
    name: str
    avatar_url: Optional[str] = None
    is_stale: bool = False
    is_placeholder: bool = False

    @classmethod
    def placeholder(cls, key: ProfileKey) -> Profile:
        return cls(
            uuid=key.uuid,
            kind=key.kind,
            name=PLACEHOLDER_NAMES[key.kind],
            is_placeholder=True,
        )


@dataclass(frozen=True)
class ProfileCacheEntry:
    kind: ProfileKind
    uuid: str
    name: str
    avatar_url: Optional[str]
    fetched_at: float  # epoch seconds

    @property
    def key(self) -> ProfileKey:
        return ProfileKey(self.kind, self.uuid)

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.fetched_at < ttl_seconds

    def to_profile(self, stale: bool = False) -> Profile:
        return Profile(
            uuid=self.uuid,
            kind=self.kind,
            name=self.name,
            avatar_url=self.avatar_url,
            is_stale=stale,
        )
