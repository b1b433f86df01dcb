"""
In-memory MessageRepository.

The log for a conversation is a list where index i holds sequence i + 1, so the
next sequence is always len(log) + 1 and pages are plain slices.
"""

from typing import Optional

from chat_service.domain.entities.message import Message, MessageDraft
from chat_service.domain.exceptions import NotFoundError
from chat_service.domain.ports.repositories import MessageRepository
from chat_service.domain.value_objects import ConversationId, MessageId, UserId
from chat_service.infrastructure.persistence.in_memory_database import InMemoryDatabase


class InMemoryMessageRepository(MessageRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    async def append(self, draft: MessageDraft) -> Message:
        log = self._db.messages.get(draft.conversation_id)
        if log is None:
            raise NotFoundError("Conversation not found")
        message = Message.from_draft(draft, sequence=len(log) + 1)
        log.append(message)
        self._db.messages_by_id[message.id] = message
        return message

    async def get_by_id(self, message_id: MessageId) -> Optional[Message]:
        return self._db.messages_by_id.get(message_id)

    async def page(
        self,
        conversation_id: ConversationId,
        before_sequence: Optional[int],
        limit: int,
    ) -> list[Message]:
        log = self._db.messages.get(conversation_id, [])
        end = len(log) if before_sequence is None else min(before_sequence - 1, len(log))
        start = max(0, end - limit)
        return list(reversed(log[start:end]))

    async def get_latest(self, conversation_id: ConversationId) -> Optional[Message]:
        log = self._db.messages.get(conversation_id)
        return log[-1] if log else None

    async def count_from_others_after(
        self, conversation_id: ConversationId, user_id: UserId, after_sequence: int
    ) -> int:
        log = self._db.messages.get(conversation_id, [])
        return sum(1 for m in log[after_sequence:] if m.sender_id != user_id)
