"""
Prisma Message Repository Implementation.

Sequence assignment:
    UPDATE conversations SET last_sequence = last_sequence + 1   (row lock)
    INSERT INTO messages (..., sequence = last_sequence)
both inside one transaction. Writers to the same conversation serialize on the
conversation row; the (conversation_id, sequence) unique index is the backstop
and surfaces as ConflictError, which MessageStore retries.
"""

import logging
from typing import Optional

from prisma import Prisma
from prisma.errors import RecordNotFoundError, UniqueViolationError
from prisma.models import Message as PrismaMessage

from chat_service.domain.entities.message import Message, MessageDraft
from chat_service.domain.exceptions import ConflictError, NotFoundError
from chat_service.domain.ports.repositories import MessageRepository
from chat_service.domain.value_objects import (
    ConversationId,
    MessageId,
    MessageType,
    UserId,
)

logger = logging.getLogger(__name__)


class PrismaMessageRepository(MessageRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaMessage) -> Message:
        """Map Prisma record to domain entity."""
        return Message(
            id=MessageId(record.id),
            conversation_id=ConversationId(record.conversation_id),
            sender_id=UserId(record.sender_id),
            content=record.content,
            type=MessageType(record.type),
            sequence=record.sequence,
            created_at=record.created_at,
        )

    async def append(self, draft: MessageDraft) -> Message:
        try:
            async with self._prisma.tx() as tx:
                conversation = await tx.conversation.update(
                    where={"id": draft.conversation_id.value},
                    data={"last_sequence": {"increment": 1}},
                )
                if conversation is None:
                    raise NotFoundError("Conversation not found")
                record = await tx.message.create(
                    data={
                        "id": draft.id.value,
                        "conversation_id": draft.conversation_id.value,
                        "sender_id": draft.sender_id.value,
                        "content": draft.content,
                        "type": draft.type.value,
                        "sequence": conversation.last_sequence,
                        "created_at": draft.created_at,
                    }
                )
        except RecordNotFoundError as e:
            raise NotFoundError("Conversation not found") from e
        except UniqueViolationError as e:
            logger.info(f"[PrismaMessage] Sequence collision in {draft.conversation_id}")
            raise ConflictError("Sequence already taken") from e
        return self._to_entity(record)

    async def get_by_id(self, message_id: MessageId) -> Optional[Message]:
        record = await self._prisma.message.find_unique(where={"id": message_id.value})
        return self._to_entity(record) if record else None

    async def page(
        self,
        conversation_id: ConversationId,
        before_sequence: Optional[int],
        limit: int,
    ) -> list[Message]:
        where = {"conversation_id": conversation_id.value}
        if before_sequence is not None:
            where["sequence"] = {"lt": before_sequence}
        records = await self._prisma.message.find_many(
            where=where,
            order={"sequence": "desc"},
            take=limit,
        )
        return [self._to_entity(record) for record in records]

    async def get_latest(self, conversation_id: ConversationId) -> Optional[Message]:
        record = await self._prisma.message.find_first(
            where={"conversation_id": conversation_id.value},
            order={"sequence": "desc"},
        )
        return self._to_entity(record) if record else None

    async def count_from_others_after(
        self, conversation_id: ConversationId, user_id: UserId, after_sequence: int
    ) -> int:
        return await self._prisma.message.count(
            where={
                "conversation_id": conversation_id.value,
                "sender_id": {"not": user_id.value},
                "sequence": {"gt": after_sequence},
            }
        )
