"""Turn raw path/body identifiers into value objects with domain errors."""

from typing import Optional

from chat_service.domain.exceptions import NotFoundError, ValidationError
from chat_service.domain.value_objects import (
    BusinessId,
    ConversationId,
    MessageCursor,
    MessageId,
    UserId,
)


def parse_user_id(raw: str, field: str = "user_id") -> UserId:
    try:
        return UserId(raw)
    except ValueError:
        raise ValidationError(f"{field} must be a valid UUID")


def parse_business_id(raw: str) -> BusinessId:
    try:
        return BusinessId(raw)
    except ValueError:
        raise ValidationError("business_id must be a valid UUID")


def parse_conversation_id(raw: str) -> ConversationId:
    # A malformed id can't name an existing conversation
    try:
        return ConversationId(raw)
    except ValueError:
        raise NotFoundError("Conversation not found")


def parse_message_id(raw: str) -> MessageId:
    try:
        return MessageId(raw)
    except ValueError:
        raise NotFoundError("Message not found")


def parse_cursor(raw: Optional[str]) -> Optional[MessageCursor]:
    try:
        return MessageCursor.parse(raw)
    except ValueError:
        raise ValidationError("cursor is invalid")
