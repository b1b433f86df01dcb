"""
Conversation Repository Port - Interface for conversation persistence.
Implementations: infrastructure/persistence/in_memory_conversation_repository.py,
                 infrastructure/persistence/prisma_conversation_repository.py
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from chat_service.domain.entities.conversation import Conversation
from chat_service.domain.entities.participant import Participant
from chat_service.domain.value_objects.conversation_id import ConversationId
from chat_service.domain.value_objects.user_id import UserId


class ConversationRepository(ABC):
    @abstractmethod
    async def get_by_id(
        self, conversation_id: ConversationId
    ) -> Optional[Conversation]: ...

    @abstractmethod
    async def get_direct(self, direct_key: str) -> Optional[Conversation]: ...

    @abstractmethod
    async def get_for_user(
        self, user_id: UserId, limit: Optional[int] = None
    ) -> list[Conversation]:
        """
        Conversations the user participates in, most recent activity first.
        No limit returns all of them.
        """
        ...

    @abstractmethod
    async def create(
        self, conversation: Conversation, participants: list[Participant]
    ) -> None:
        """
        Insert the conversation and all of its participants as one unit.

        Raises ConflictError if a direct conversation with the same pair key
        already exists.
        """
        ...

    @abstractmethod
    async def touch(self, conversation_id: ConversationId, at: datetime) -> None: ...
