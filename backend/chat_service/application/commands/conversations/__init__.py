"""Conversation-related commands."""

from chat_service.application.commands.conversations.create_direct_conversation import (
    CreateDirectConversationCommand,
    CreateDirectConversationHandler,
)
from chat_service.application.commands.conversations.create_group_conversation import (
    CreateGroupConversationCommand,
    CreateGroupConversationHandler,
)
from chat_service.application.commands.conversations.create_business_conversation import (
    CreateBusinessConversationCommand,
    CreateBusinessConversationHandler,
)
from chat_service.application.commands.conversations.add_participants import (
    AddParticipantsCommand,
    AddParticipantsHandler,
)

__all__ = [
    "CreateDirectConversationCommand",
    "CreateDirectConversationHandler",
    "CreateGroupConversationCommand",
    "CreateGroupConversationHandler",
    "CreateBusinessConversationCommand",
    "CreateBusinessConversationHandler",
    "AddParticipantsCommand",
    "AddParticipantsHandler",
]
