"""Conversation DTOs for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from chat_service.application.dto.message import MessageDTO
from chat_service.application.dto.profile import ProfileDTO


class ParticipantDTO(BaseModel):
    user_id: str
    role: str
    joined_at: datetime
    last_read_sequence: int
    is_muted: bool = False
    profile: Optional[ProfileDTO] = None


class ConversationDTO(BaseModel):
    id: str
    type: str
    name: Optional[str] = None
    business_id: Optional[str] = None
    created_at: datetime
    last_activity: datetime
    participants: list[ParticipantDTO] = []
    unread_count: Optional[int] = None
    last_message: Optional[MessageDTO] = None
    business: Optional[ProfileDTO] = None


class ConversationListDTO(BaseModel):
    conversations: list[ConversationDTO]
    total: int
