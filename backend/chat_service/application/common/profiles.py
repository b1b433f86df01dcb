"""Helpers for attaching display profiles to conversations and messages."""

from typing import Iterable, Optional

from chat_service.application.services.profile_cache import ProfileBatch
from chat_service.domain.entities.participant import Participant
from chat_service.domain.entities.profile import Profile
from chat_service.domain.value_objects import ParticipantRole, UserId


def collect_profile_ids(
    participants: Iterable[Participant], senders: Iterable[UserId] = ()
) -> tuple[list[str], list[str]]:
    """Split ids into (user_uuids, business_uuids) for one ProfileCache call."""
    users: set[str] = set()
    businesses: set[str] = set()
    for participant in participants:
        if participant.role is ParticipantRole.BUSINESS:
            businesses.add(participant.user_id.value)
        else:
            users.add(participant.user_id.value)
    for sender in senders:
        if sender.value not in businesses:
            users.add(sender.value)
    return sorted(users), sorted(businesses)


def profile_for(
    user_id: UserId, profiles: ProfileBatch, business_ids: Iterable[str] = ()
) -> Optional[Profile]:
    if user_id.value in business_ids:
        return profiles.businesses.get(user_id.value)
    return profiles.users.get(user_id.value)
