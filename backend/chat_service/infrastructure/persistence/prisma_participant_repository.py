"""
Prisma Participant Repository Implementation.

Counter changes are single UPDATE statements (update_many with increment or a
conditional where), never read-modify-write.
"""

from datetime import datetime
from typing import Any, Optional

from prisma import Prisma
from prisma.models import Participant as PrismaParticipant

from chat_service.domain.entities.participant import Participant
from chat_service.domain.ports.repositories import ParticipantRepository
from chat_service.domain.value_objects import ConversationId, ParticipantRole, UserId


def participant_create_data(participant: Participant) -> dict[str, Any]:
    return {
        "conversation_id": participant.conversation_id.value,
        "user_id": participant.user_id.value,
        "role": participant.role.value,
        "joined_at": participant.joined_at,
        "unread_count": participant.unread_count,
        "last_read_sequence": participant.last_read_sequence,
        "last_read_at": participant.last_read_at,
        "is_muted": participant.is_muted,
    }


class PrismaParticipantRepository(ParticipantRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaParticipant) -> Participant:
        return Participant(
            conversation_id=ConversationId(record.conversation_id),
            user_id=UserId(record.user_id),
            role=ParticipantRole(record.role),
            joined_at=record.joined_at,
            unread_count=record.unread_count,
            last_read_sequence=record.last_read_sequence,
            last_read_at=record.last_read_at,
            is_muted=record.is_muted,
        )

    def _key(self, conversation_id: ConversationId, user_id: UserId) -> dict[str, Any]:
        return {"conversation_id": conversation_id.value, "user_id": user_id.value}

    async def get(
        self, conversation_id: ConversationId, user_id: UserId
    ) -> Optional[Participant]:
        record = await self._prisma.participant.find_unique(
            where={"conversation_id_user_id": self._key(conversation_id, user_id)}
        )
        return self._to_entity(record) if record else None

    async def list_for_conversation(self, conversation_id: ConversationId) -> list[Participant]:
        records = await self._prisma.participant.find_many(
            where={"conversation_id": conversation_id.value},
            order={"joined_at": "asc"},
        )
        return [self._to_entity(record) for record in records]

    async def list_for_user(self, user_id: UserId) -> list[Participant]:
        records = await self._prisma.participant.find_many(
            where={"user_id": user_id.value}
        )
        return [self._to_entity(record) for record in records]

    async def add(self, participants: list[Participant]) -> list[Participant]:
        if not participants:
            return []
        conversation_ids = {p.conversation_id.value for p in participants}
        existing = await self._prisma.participant.find_many(
            where={
                "conversation_id": {"in": list(conversation_ids)},
                "user_id": {"in": [p.user_id.value for p in participants]},
            }
        )
        present = {(r.conversation_id, r.user_id) for r in existing}
        fresh = [
            p
            for p in participants
            if (p.conversation_id.value, p.user_id.value) not in present
        ]
        if fresh:
            await self._prisma.participant.create_many(
                data=[participant_create_data(p) for p in fresh],
                skip_duplicates=True,
            )
        return fresh

    async def increment_unread(
        self, conversation_id: ConversationId, except_user_id: UserId
    ) -> int:
        return await self._prisma.participant.update_many(
            where={
                "conversation_id": conversation_id.value,
                "user_id": {"not": except_user_id.value},
            },
            data={"unread_count": {"increment": 1}},
        )

    async def mark_read(
        self,
        conversation_id: ConversationId,
        user_id: UserId,
        up_to_sequence: int,
        at: datetime,
    ) -> bool:
        updated = await self._prisma.participant.update_many(
            where={
                **self._key(conversation_id, user_id),
                "last_read_sequence": {"lte": up_to_sequence},
            },
            data={
                "last_read_sequence": up_to_sequence,
                "last_read_at": at,
                "unread_count": 0,
            },
        )
        return updated > 0

    async def set_unread(
        self, conversation_id: ConversationId, user_id: UserId, count: int
    ) -> None:
        await self._prisma.participant.update_many(
            where=self._key(conversation_id, user_id),
            data={"unread_count": count},
        )

    async def set_muted(
        self, conversation_id: ConversationId, user_id: UserId, is_muted: bool
    ) -> bool:
        updated = await self._prisma.participant.update_many(
            where=self._key(conversation_id, user_id),
            data={"is_muted": is_muted},
        )
        return updated > 0
