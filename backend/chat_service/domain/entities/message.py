"""
Message Entity - a single immutable message in a conversation.

The sequence number is assigned by the repository in the same step as the
insert, so application code only ever builds a MessageDraft.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from chat_service.domain.value_objects.conversation_id import ConversationId
from chat_service.domain.value_objects.message_id import MessageId
from chat_service.domain.value_objects.message_type import MessageType
from chat_service.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class MessageDraft:
    id: MessageId
    conversation_id: ConversationId
    sender_id: UserId
    content: str
    type: MessageType
    created_at: datetime

    @classmethod
    def create(
        cls,
        conversation_id: ConversationId,
        sender_id: UserId,
        content: str,
        type: MessageType = MessageType.TEXT,
    ) -> MessageDraft:
        """Factory method to create a new draft with a generated ID and timestamp."""
        return cls(
            id=MessageId.generate(),
            conversation_id=conversation_id,
            sender_id=sender_id,
            content=content,
            type=type,
            created_at=datetime.now(timezone.utc),
        )


@dataclass(frozen=True)
class Message:
    id: MessageId
    conversation_id: ConversationId
    sender_id: UserId
    content: str
    type: MessageType
    sequence: int
    created_at: datetime

    def __post_init__(self):
        if self.sequence < 1:
            raise ValueError(f"Invalid sequence: {self.sequence}")

    @classmethod
    def from_draft(cls, draft: MessageDraft, sequence: int) -> Message:
        return cls(
            id=draft.id,
            conversation_id=draft.conversation_id,
            sender_id=draft.sender_id,
            content=draft.content,
            type=draft.type,
            sequence=sequence,
            created_at=draft.created_at,
        )
