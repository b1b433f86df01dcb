"""
Prisma Conversation Repository Implementation.

- Conversation and its participants are inserted in one transaction
- direct_key carries a unique index, so two creators racing on the same pair
  end with one row and one UniqueViolationError (→ ConflictError)
"""

from datetime import datetime
from typing import Optional

from prisma import Prisma
from prisma.errors import UniqueViolationError
from prisma.models import Conversation as PrismaConversation

from chat_service.domain.entities.conversation import Conversation
from chat_service.domain.entities.participant import Participant
from chat_service.domain.exceptions import ConflictError
from chat_service.domain.ports.repositories import ConversationRepository
from chat_service.domain.value_objects import (
    BusinessId,
    ConversationId,
    ConversationType,
    UserId,
)
from chat_service.infrastructure.persistence.prisma_participant_repository import (
    participant_create_data,
)


class PrismaConversationRepository(ConversationRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaConversation) -> Conversation:
        """Map Prisma record to domain entity."""
        return Conversation(
            id=ConversationId(record.id),
            type=ConversationType(record.type),
            created_at=record.created_at,
            last_activity=record.last_activity,
            name=record.name,
            business_id=BusinessId(record.business_id) if record.business_id else None,
            direct_key=record.direct_key,
        )

    async def get_by_id(self, conversation_id: ConversationId) -> Optional[Conversation]:
        record = await self._prisma.conversation.find_unique(
            where={"id": conversation_id.value}
        )
        return self._to_entity(record) if record else None

    async def get_direct(self, direct_key: str) -> Optional[Conversation]:
        record = await self._prisma.conversation.find_unique(
            where={"direct_key": direct_key}
        )
        return self._to_entity(record) if record else None

    async def get_for_user(
        self, user_id: UserId, limit: Optional[int] = None
    ) -> list[Conversation]:
        """Conversations the user participates in, most recent activity first."""
        query = {
            "where": {"participants": {"some": {"user_id": user_id.value}}},
            "order": [{"last_activity": "desc"}, {"created_at": "desc"}],
        }
        if limit is not None:
            query["take"] = limit
        records = await self._prisma.conversation.find_many(**query)
        return [self._to_entity(record) for record in records]

    async def create(
        self, conversation: Conversation, participants: list[Participant]
    ) -> None:
        try:
            async with self._prisma.tx() as tx:
                await tx.conversation.create(
                    data={
                        "id": conversation.id.value,
                        "type": conversation.type.value,
                        "name": conversation.name,
                        "business_id": (
                            conversation.business_id.value
                            if conversation.business_id
                            else None
                        ),
                        "direct_key": conversation.direct_key,
                        "created_at": conversation.created_at,
                        "last_activity": conversation.last_activity,
                    }
                )
                await tx.participant.create_many(
                    data=[participant_create_data(p) for p in participants]
                )
        except UniqueViolationError as e:
            raise ConflictError("Conversation already exists") from e

    async def touch(self, conversation_id: ConversationId, at: datetime) -> None:
        await self._prisma.conversation.update_many(
            where={"id": conversation_id.value, "last_activity": {"lt": at}},
            data={"last_activity": at},
        )
