"""In-memory ConversationRepository."""

from dataclasses import replace
from datetime import datetime
from typing import Optional

from chat_service.domain.entities.conversation import Conversation
from chat_service.domain.entities.participant import Participant
from chat_service.domain.exceptions import ConflictError
from chat_service.domain.ports.repositories import ConversationRepository
from chat_service.domain.value_objects import ConversationId, UserId
from chat_service.infrastructure.persistence.in_memory_database import InMemoryDatabase


class InMemoryConversationRepository(ConversationRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    async def get_by_id(self, conversation_id: ConversationId) -> Optional[Conversation]:
        conversation = self._db.conversations.get(conversation_id)
        return replace(conversation) if conversation else None

    async def get_direct(self, direct_key: str) -> Optional[Conversation]:
        conversation_id = self._db.direct_keys.get(direct_key)
        if conversation_id is None:
            return None
        return replace(self._db.conversations[conversation_id])

    async def get_for_user(
        self, user_id: UserId, limit: Optional[int] = None
    ) -> list[Conversation]:
        owned = [
            self._db.conversations[conversation_id]
            for conversation_id, members in self._db.participants.items()
            if user_id in members
        ]
        owned.sort(key=lambda c: (c.last_activity, c.created_at), reverse=True)
        if limit is not None:
            owned = owned[:limit]
        return [replace(c) for c in owned]

    async def create(
        self, conversation: Conversation, participants: list[Participant]
    ) -> None:
        if conversation.id in self._db.conversations:
            raise ConflictError(f"Conversation {conversation.id} already exists")
        if conversation.direct_key and conversation.direct_key in self._db.direct_keys:
            raise ConflictError("Direct conversation already exists for this pair")

        self._db.conversations[conversation.id] = replace(conversation)
        if conversation.direct_key:
            self._db.direct_keys[conversation.direct_key] = conversation.id
        self._db.participants[conversation.id] = {
            p.user_id: replace(p) for p in participants
        }
        self._db.messages[conversation.id] = []

    async def touch(self, conversation_id: ConversationId, at: datetime) -> None:
        conversation = self._db.conversations.get(conversation_id)
        if conversation is not None:
            conversation.touch(at)
