"""
Participant Entity - a (conversation, user) membership with read bookkeeping.

unread_count is derived state; it can always be recomputed from the message log
as the number of messages from other senders with sequence > last_read_sequence.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from chat_service.domain.value_objects.conversation_id import ConversationId
from chat_service.domain.value_objects.participant_role import ParticipantRole
from chat_service.domain.value_objects.user_id import UserId


@dataclass
class Participant:
    conversation_id: ConversationId
    user_id: UserId
    role: ParticipantRole
    joined_at: datetime
    unread_count: int = 0
    last_read_sequence: int = 0
    last_read_at: Optional[datetime] = None
    is_muted: bool = False

    @classmethod
    def join(
        cls,
        conversation_id: ConversationId,
        user_id: UserId,
        role: ParticipantRole = ParticipantRole.MEMBER,
    ) -> Participant:
        return cls(
            conversation_id=conversation_id,
            user_id=user_id,
            role=role,
            joined_at=datetime.now(timezone.utc),
        )

    def can_advance_to(self, sequence: int) -> bool:
        return sequence >= self.last_read_sequence
