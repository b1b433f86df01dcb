"""Data Transfer Objects - pydantic models for API payloads and realtime events."""

from chat_service.application.dto.profile import ProfileDTO
from chat_service.application.dto.message import MessageDTO, MessagePageDTO
from chat_service.application.dto.conversation import (
    ConversationDTO,
    ConversationListDTO,
    ParticipantDTO,
)
from chat_service.application.dto.notification import (
    MarkReadResultDTO,
    MuteStateDTO,
    UnreadCountDTO,
    UnreadCountsDTO,
)

__all__ = [
    "ProfileDTO",
    "MessageDTO",
    "MessagePageDTO",
    "ConversationDTO",
    "ConversationListDTO",
    "ParticipantDTO",
    "MarkReadResultDTO",
    "MuteStateDTO",
    "UnreadCountDTO",
    "UnreadCountsDTO",
]
