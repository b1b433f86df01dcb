"""Profile DTO - display data attached to participants and senders."""

from typing import Optional

from pydantic import BaseModel

from chat_service.domain.entities.profile import Profile


class ProfileDTO(BaseModel):
    uuid: str
    kind: str
    name: str
    avatar_url: Optional[str] = None
    is_stale: bool = False
    is_placeholder: bool = False

    @classmethod
    def from_profile(cls, profile: Optional[Profile]) -> Optional["ProfileDTO"]:
        if profile is None:
            return None
        return cls(
            uuid=profile.uuid,
            kind=profile.kind.value,
            name=profile.name,
            avatar_url=profile.avatar_url,
            is_stale=profile.is_stale,
            is_placeholder=profile.is_placeholder,
        )
