"""Message DTOs for API request/response and realtime payloads."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from chat_service.application.dto.profile import ProfileDTO
from chat_service.domain.entities.message import Message
from chat_service.domain.entities.profile import Profile


class MessageDTO(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str
    type: str
    sequence: int
    created_at: datetime
    sender: Optional[ProfileDTO] = None

    @classmethod
    def from_entity(
        cls, message: Message, sender: Optional[Profile] = None
    ) -> "MessageDTO":
        return cls(
            id=message.id.value,
            conversation_id=message.conversation_id.value,
            sender_id=message.sender_id.value,
            content=message.content,
            type=message.type.value,
            sequence=message.sequence,
            created_at=message.created_at,
            sender=ProfileDTO.from_profile(sender),
        )


class MessagePageDTO(BaseModel):
    messages: list[MessageDTO]
    next_cursor: Optional[str] = None
