"""
Message Repository Port - append-only message log.
"""

from abc import ABC, abstractmethod
from typing import Optional

from chat_service.domain.entities.message import Message, MessageDraft
from chat_service.domain.value_objects.conversation_id import ConversationId
from chat_service.domain.value_objects.message_id import MessageId
from chat_service.domain.value_objects.user_id import UserId


class MessageRepository(ABC):
    @abstractmethod
    async def append(self, draft: MessageDraft) -> Message:
        """
        Assign the next sequence number and insert, as one indivisible step.

        Raises ConflictError when a concurrent writer claimed the same sequence
        and the adapter could not resolve it internally.
        """
        ...

    @abstractmethod
    async def get_by_id(self, message_id: MessageId) -> Optional[Message]: ...

    @abstractmethod
    async def page(
        self,
        conversation_id: ConversationId,
        before_sequence: Optional[int],
        limit: int,
    ) -> list[Message]:
        """Messages in descending sequence order, strictly before before_sequence."""
        ...

    @abstractmethod
    async def get_latest(self, conversation_id: ConversationId) -> Optional[Message]: ...

    @abstractmethod
    async def count_from_others_after(
        self, conversation_id: ConversationId, user_id: UserId, after_sequence: int
    ) -> int: ...
