"""
APPLICATION SERVICES - the engine components.

Leaf-first: ProfileCache, ParticipantRegistry, MessageStore,
ConversationManager, NotificationDispatcher. UserService keeps local users in
step with the identity token.
"""

from chat_service.application.services.profile_cache import ProfileBatch, ProfileCache
from chat_service.application.services.participant_registry import ParticipantRegistry
from chat_service.application.services.message_store import MessagePage, MessageStore
from chat_service.application.services.conversation_manager import (
    BusinessConversation,
    ConversationDetails,
    ConversationManager,
    ConversationSummary,
)
from chat_service.application.services.notification_dispatcher import (
    ClientSession,
    ClientState,
    NotificationDispatcher,
)
from chat_service.application.services.user_service import UserService

__all__ = [
    "ProfileBatch",
    "ProfileCache",
    "ParticipantRegistry",
    "MessagePage",
    "MessageStore",
    "BusinessConversation",
    "ConversationDetails",
    "ConversationManager",
    "ConversationSummary",
    "ClientSession",
    "ClientState",
    "NotificationDispatcher",
    "UserService",
]
