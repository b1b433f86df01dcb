"""
Participant Repository Port - membership and per-participant read bookkeeping.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from chat_service.domain.entities.participant import Participant
from chat_service.domain.value_objects.conversation_id import ConversationId
from chat_service.domain.value_objects.user_id import UserId


class ParticipantRepository(ABC):
    @abstractmethod
    async def get(
        self, conversation_id: ConversationId, user_id: UserId
    ) -> Optional[Participant]: ...

    @abstractmethod
    async def list_for_conversation(
        self, conversation_id: ConversationId
    ) -> list[Participant]: ...

    @abstractmethod
    async def list_for_user(self, user_id: UserId) -> list[Participant]: ...

    @abstractmethod
    async def add(self, participants: list[Participant]) -> list[Participant]:
        """Insert participants, skipping ones already present. Returns the inserted ones."""
        ...

    @abstractmethod
    async def increment_unread(
        self, conversation_id: ConversationId, except_user_id: UserId
    ) -> int:
        """Atomically add 1 to every other participant's counter. Returns rows touched."""
        ...

    @abstractmethod
    async def mark_read(
        self,
        conversation_id: ConversationId,
        user_id: UserId,
        up_to_sequence: int,
        at: datetime,
    ) -> bool:
        """
        Conditionally reset unread to 0 and move the pointer to up_to_sequence.

        Applied only when up_to_sequence >= current pointer. Returns whether
        the row was updated.
        """
        ...

    @abstractmethod
    async def set_unread(
        self, conversation_id: ConversationId, user_id: UserId, count: int
    ) -> None: ...

    @abstractmethod
    async def set_muted(
        self, conversation_id: ConversationId, user_id: UserId, is_muted: bool
    ) -> bool: ...
