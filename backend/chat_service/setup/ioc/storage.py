"""
Storage providers - one per STORAGE_BACKEND.

Repositories are app-scoped: the in-memory ones share one InMemoryDatabase and
the Prisma ones share one connected client.
"""

from typing import AsyncIterable

from dishka import Provider, Scope, provide

from chat_service.domain.ports.repositories import (
    ConversationRepository,
    MessageRepository,
    ParticipantRepository,
    UserRepository,
)
from chat_service.infrastructure.persistence import (
    InMemoryConversationRepository,
    InMemoryDatabase,
    InMemoryMessageRepository,
    InMemoryParticipantRepository,
    InMemoryUserRepository,
)


class InMemoryStorageProvider(Provider):
    @provide(scope=Scope.APP)
    def get_database(self) -> InMemoryDatabase:
        return InMemoryDatabase()

    @provide(scope=Scope.APP)
    def get_conversation_repository(self, db: InMemoryDatabase) -> ConversationRepository:
        return InMemoryConversationRepository(db)

    @provide(scope=Scope.APP)
    def get_participant_repository(self, db: InMemoryDatabase) -> ParticipantRepository:
        return InMemoryParticipantRepository(db)

    @provide(scope=Scope.APP)
    def get_message_repository(self, db: InMemoryDatabase) -> MessageRepository:
        return InMemoryMessageRepository(db)

    @provide(scope=Scope.APP)
    def get_user_repository(self, db: InMemoryDatabase) -> UserRepository:
        return InMemoryUserRepository(db)


def prisma_storage_provider() -> Provider:
    """Build the Prisma provider. Needs a generated client, so imports are deferred."""
    from prisma import Prisma

    from chat_service.infrastructure.persistence.prisma_conversation_repository import (
        PrismaConversationRepository,
    )
    from chat_service.infrastructure.persistence.prisma_message_repository import (
        PrismaMessageRepository,
    )
    from chat_service.infrastructure.persistence.prisma_participant_repository import (
        PrismaParticipantRepository,
    )
    from chat_service.infrastructure.persistence.prisma_user_repository import (
        PrismaUserRepository,
    )

    class PrismaStorageProvider(Provider):
        @provide(scope=Scope.APP)
        async def get_prisma(self) -> AsyncIterable[Prisma]:
            """Connected once at startup, disconnected when the container closes."""
            prisma = Prisma()
            await prisma.connect()
            yield prisma
            await prisma.disconnect()

        @provide(scope=Scope.APP)
        def get_conversation_repository(self, prisma: Prisma) -> ConversationRepository:
            return PrismaConversationRepository(prisma)

        @provide(scope=Scope.APP)
        def get_participant_repository(self, prisma: Prisma) -> ParticipantRepository:
            return PrismaParticipantRepository(prisma)

        @provide(scope=Scope.APP)
        def get_message_repository(self, prisma: Prisma) -> MessageRepository:
            return PrismaMessageRepository(prisma)

        @provide(scope=Scope.APP)
        def get_user_repository(self, prisma: Prisma) -> UserRepository:
            return PrismaUserRepository(prisma)

    return PrismaStorageProvider()
