"""In-memory ParticipantRepository."""

from dataclasses import replace
from datetime import datetime
from typing import Optional

from chat_service.domain.entities.participant import Participant
from chat_service.domain.ports.repositories import ParticipantRepository
from chat_service.domain.value_objects import ConversationId, UserId
from chat_service.infrastructure.persistence.in_memory_database import InMemoryDatabase


class InMemoryParticipantRepository(ParticipantRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    def _row(self, conversation_id: ConversationId, user_id: UserId) -> Optional[Participant]:
        return self._db.participants.get(conversation_id, {}).get(user_id)

    async def get(
        self, conversation_id: ConversationId, user_id: UserId
    ) -> Optional[Participant]:
        row = self._row(conversation_id, user_id)
        return replace(row) if row else None

    async def list_for_conversation(self, conversation_id: ConversationId) -> list[Participant]:
        return [replace(p) for p in self._db.participants.get(conversation_id, {}).values()]

    async def list_for_user(self, user_id: UserId) -> list[Participant]:
        return [
            replace(members[user_id])
            for members in self._db.participants.values()
            if user_id in members
        ]

    async def add(self, participants: list[Participant]) -> list[Participant]:
        inserted = []
        for participant in participants:
            members = self._db.participants.get(participant.conversation_id)
            if members is None or participant.user_id in members:
                continue
            members[participant.user_id] = replace(participant)
            inserted.append(replace(participant))
        return inserted

    async def increment_unread(
        self, conversation_id: ConversationId, except_user_id: UserId
    ) -> int:
        touched = 0
        for user_id, row in self._db.participants.get(conversation_id, {}).items():
            if user_id != except_user_id:
                row.unread_count += 1
                touched += 1
        return touched

    async def mark_read(
        self,
        conversation_id: ConversationId,
        user_id: UserId,
        up_to_sequence: int,
        at: datetime,
    ) -> bool:
        row = self._row(conversation_id, user_id)
        if row is None or up_to_sequence < row.last_read_sequence:
            return False
        row.last_read_sequence = up_to_sequence
        row.last_read_at = at
        row.unread_count = 0
        return True

    async def set_unread(
        self, conversation_id: ConversationId, user_id: UserId, count: int
    ) -> None:
        row = self._row(conversation_id, user_id)
        if row is not None:
            row.unread_count = count

    async def set_muted(
        self, conversation_id: ConversationId, user_id: UserId, is_muted: bool
    ) -> bool:
        row = self._row(conversation_id, user_id)
        if row is None:
            return False
        row.is_muted = is_muted
        return True
