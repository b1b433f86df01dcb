"""
Persistence Layer - repository implementations for domain ports.

Only the in-memory repositories are exported here. The Prisma repositories need
a generated client (`prisma generate`) and are imported by the container when
STORAGE_BACKEND=prisma.
"""

from chat_service.infrastructure.persistence.in_memory_database import InMemoryDatabase
from chat_service.infrastructure.persistence.in_memory_conversation_repository import (
    InMemoryConversationRepository,
)
from chat_service.infrastructure.persistence.in_memory_participant_repository import (
    InMemoryParticipantRepository,
)
from chat_service.infrastructure.persistence.in_memory_message_repository import (
    InMemoryMessageRepository,
)
from chat_service.infrastructure.persistence.in_memory_user_repository import (
    InMemoryUserRepository,
)

__all__ = [
    "InMemoryDatabase",
    "InMemoryConversationRepository",
    "InMemoryParticipantRepository",
    "InMemoryMessageRepository",
    "InMemoryUserRepository",
]
