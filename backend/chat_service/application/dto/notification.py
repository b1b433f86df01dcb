"""Notification DTOs - unread counters, read receipts and mute state."""

from pydantic import BaseModel


class UnreadCountsDTO(BaseModel):
    user_id: str
    unread_counts: dict[str, int]
    total_unread: int


class UnreadCountDTO(BaseModel):
    conversation_id: str
    unread_count: int


class MarkReadResultDTO(BaseModel):
    conversation_id: str
    up_to_sequence: int
    advanced: bool


class MuteStateDTO(BaseModel):
    conversation_id: str
    is_muted: bool
