"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass or Enum)
- Validates itself on creation
- Pure Python (no framework dependencies)
"""

from chat_service.domain.value_objects.user_id import UserId
from chat_service.domain.value_objects.business_id import BusinessId
from chat_service.domain.value_objects.conversation_id import ConversationId
from chat_service.domain.value_objects.message_id import MessageId
from chat_service.domain.value_objects.message_cursor import MessageCursor
from chat_service.domain.value_objects.conversation_type import ConversationType
from chat_service.domain.value_objects.message_type import MessageType
from chat_service.domain.value_objects.participant_role import ParticipantRole
from chat_service.domain.value_objects.profile_kind import ProfileKind

__all__ = [
    "UserId",
    "BusinessId",
    "ConversationId",
    "MessageId",
    "MessageCursor",
    "ConversationType",
    "MessageType",
    "ParticipantRole",
    "ProfileKind",
]
