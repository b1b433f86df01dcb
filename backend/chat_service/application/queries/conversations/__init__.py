"""Conversation-related queries."""

from chat_service.application.queries.conversations.list_conversations import (
    ListConversationsHandler,
    ListConversationsQuery,
    ListConversationsResult,
)
from chat_service.application.queries.conversations.get_conversation import (
    GetConversationHandler,
    GetConversationQuery,
    GetConversationResult,
)

__all__ = [
    "ListConversationsHandler",
    "ListConversationsQuery",
    "ListConversationsResult",
    "GetConversationHandler",
    "GetConversationQuery",
    "GetConversationResult",
]
