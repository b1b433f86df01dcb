"""
ENTITIES - Business objects with identity

Each entity:
- Has a unique identifier
- Has behavior (methods)
- Pure Python dataclasses (no ORM, no Pydantic)
"""

from chat_service.domain.entities.conversation import Conversation
from chat_service.domain.entities.participant import Participant
from chat_service.domain.entities.message import Message, MessageDraft
from chat_service.domain.entities.user import User
from chat_service.domain.entities.profile import Profile, ProfileCacheEntry, ProfileKey

__all__ = [
    "Conversation",
    "Participant",
    "Message",
    "MessageDraft",
    "User",
    "Profile",
    "ProfileCacheEntry",
    "ProfileKey",
]
