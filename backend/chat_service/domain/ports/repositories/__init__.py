"""
REPOSITORY PORTS - Data persistence interfaces

Each repository port:
- Is an abstract base class (ABC)
- Defines methods the engine needs
- Does NOT specify implementation (Prisma, in-memory, etc.)

Operations that must be atomic (sequence assignment, unread increments,
monotonic read pointers) are single repository methods so each adapter can
make them indivisible in its own storage engine.
"""

from chat_service.domain.ports.repositories.conversation_repository import (
    ConversationRepository,
)
from chat_service.domain.ports.repositories.participant_repository import (
    ParticipantRepository,
)
from chat_service.domain.ports.repositories.message_repository import MessageRepository
from chat_service.domain.ports.repositories.user_repository import UserRepository

__all__ = [
    "ConversationRepository",
    "ParticipantRepository",
    "MessageRepository",
    "UserRepository",
]
