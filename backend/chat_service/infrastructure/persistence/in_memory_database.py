"""
In-memory database shared by the in-memory repositories.

Every repository method runs its critical section without awaiting, so on one
event loop each method is atomic. Stored entities are copied on the way in and
out, so callers never hold references into the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from chat_service.domain.entities.conversation import Conversation
from chat_service.domain.entities.message import Message
from chat_service.domain.entities.participant import Participant
from chat_service.domain.entities.user import User
from chat_service.domain.value_objects import ConversationId, MessageId, UserId


@dataclass
class InMemoryDatabase:
    conversations: dict[ConversationId, Conversation] = field(default_factory=dict)
    direct_keys: dict[str, ConversationId] = field(default_factory=dict)
    # conversation -> user -> participant, in join order
    participants: dict[ConversationId, dict[UserId, Participant]] = field(default_factory=dict)
    # conversation -> log where index i holds sequence i + 1
    messages: dict[ConversationId, list[Message]] = field(default_factory=dict)
    messages_by_id: dict[MessageId, Message] = field(default_factory=dict)
    users: dict[UserId, User] = field(default_factory=dict)
    kaha_ids: dict[str, UserId] = field(default_factory=dict)
