"""
Dishka DI Container Setup.

Scopes:
- Scope.APP     → created once, shared by every request and WebSocket:
                  repositories, cache store, identity client and the engine
                  services (presence and the in-flight profile map must be shared)
- Scope.REQUEST → command/query handlers, one per HTTP request

Flow:
  Container → provides → ConversationManager → to → CreateGroupConversationHandler
                                ↓
                  uses ConversationRepository interface
"""

from typing import AsyncIterable, Optional

from dishka import AsyncContainer, Provider, Scope, make_async_container, provide

from chat_service.application.commands.conversations import (
    AddParticipantsHandler,
    CreateBusinessConversationHandler,
    CreateDirectConversationHandler,
    CreateGroupConversationHandler,
)
from chat_service.application.commands.messages import SendMessageHandler
from chat_service.application.commands.notifications import (
    MarkReadHandler,
    SetMuteHandler,
)
from chat_service.application.queries.conversations import (
    GetConversationHandler,
    ListConversationsHandler,
)
from chat_service.application.queries.messages import (
    GetMessageHandler,
    GetMessagePageHandler,
)
from chat_service.application.queries.notifications import (
    GetUnreadCountHandler,
    GetUnreadCountsHandler,
)
from chat_service.application.services import (
    ConversationManager,
    MessageStore,
    NotificationDispatcher,
    ParticipantRegistry,
    ProfileCache,
    UserService,
)
from chat_service.config.settings import Config, get_config
from chat_service.domain.ports import ProfileCacheStore, ProfileDirectory
from chat_service.domain.ports.repositories import (
    ConversationRepository,
    MessageRepository,
    ParticipantRepository,
    UserRepository,
)
from chat_service.infrastructure.cache import (
    InMemoryProfileCacheStore,
    RedisProfileCacheStore,
    close_redis_client,
    create_redis_client,
)
from chat_service.infrastructure.external import HttpProfileDirectory
from chat_service.setup.ioc.storage import InMemoryStorageProvider, prisma_storage_provider


class AppProvider(Provider):
    """
    Application dependency provider.

    Storage repositories come from the storage provider selected in
    create_container(); everything else is registered here.
    """

    def __init__(self, config: type[Config] = Config):
        super().__init__()
        self._config = config

    # ==================== PROFILE CACHE BACKENDS ====================

    @provide(scope=Scope.APP)
    async def get_profile_cache_store(self) -> AsyncIterable[ProfileCacheStore]:
        if self._config.PROFILE_CACHE_BACKEND == "redis":
            client = await create_redis_client(self._config.REDIS_URL)
            yield RedisProfileCacheStore(
                client,
                ttl_seconds=self._config.PROFILE_CACHE_TTL,
                stale_retention_seconds=self._config.PROFILE_STALE_RETENTION,
            )
            await close_redis_client(client)
        else:
            yield InMemoryProfileCacheStore()

    @provide(scope=Scope.APP)
    def get_profile_directory(self) -> ProfileDirectory:
        return HttpProfileDirectory(
            base_url=self._config.PROFILE_SERVICE_URL,
            token=self._config.PROFILE_SERVICE_TOKEN,
            timeout=self._config.PROFILE_FETCH_TIMEOUT,
        )

    # ==================== ENGINE SERVICES ====================

    @provide(scope=Scope.APP)
    def get_profile_cache(
        self, directory: ProfileDirectory, store: ProfileCacheStore
    ) -> ProfileCache:
        return ProfileCache(
            directory,
            store,
            ttl_seconds=self._config.PROFILE_CACHE_TTL,
            fetch_timeout=self._config.PROFILE_FETCH_TIMEOUT,
        )

    @provide(scope=Scope.APP)
    def get_participant_registry(
        self,
        participant_repository: ParticipantRepository,
        message_repository: MessageRepository,
    ) -> ParticipantRegistry:
        return ParticipantRegistry(participant_repository, message_repository)

    @provide(scope=Scope.APP)
    def get_message_store(
        self,
        message_repository: MessageRepository,
        conversation_repository: ConversationRepository,
        registry: ParticipantRegistry,
    ) -> MessageStore:
        return MessageStore(
            message_repository,
            conversation_repository,
            registry,
            page_default=self._config.MESSAGE_PAGE_DEFAULT,
            page_max=self._config.MESSAGE_PAGE_MAX,
            max_length=self._config.MESSAGE_MAX_LENGTH,
            max_attempts=self._config.MESSAGE_APPEND_MAX_ATTEMPTS,
        )

    @provide(scope=Scope.APP)
    def get_conversation_manager(
        self,
        conversation_repository: ConversationRepository,
        registry: ParticipantRegistry,
        message_store: MessageStore,
    ) -> ConversationManager:
        return ConversationManager(
            conversation_repository,
            registry,
            message_store,
            user_limit=self._config.CONVERSATION_USER_LIMIT or None,
        )

    @provide(scope=Scope.APP)
    def get_notification_dispatcher(
        self, registry: ParticipantRegistry
    ) -> NotificationDispatcher:
        return NotificationDispatcher(
            registry, typing_timeout=self._config.TYPING_TIMEOUT
        )

    @provide(scope=Scope.APP)
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        return UserService(user_repository)

    # ==================== HANDLERS ====================
    # Constructor arguments are resolved from the type hints of __init__

    create_direct_handler = provide(CreateDirectConversationHandler, scope=Scope.REQUEST)
    create_group_handler = provide(CreateGroupConversationHandler, scope=Scope.REQUEST)
    create_business_handler = provide(CreateBusinessConversationHandler, scope=Scope.REQUEST)
    add_participants_handler = provide(AddParticipantsHandler, scope=Scope.REQUEST)
    send_message_handler = provide(SendMessageHandler, scope=Scope.REQUEST)
    mark_read_handler = provide(MarkReadHandler, scope=Scope.REQUEST)
    set_mute_handler = provide(SetMuteHandler, scope=Scope.REQUEST)
    list_conversations_handler = provide(ListConversationsHandler, scope=Scope.REQUEST)
    get_conversation_handler = provide(GetConversationHandler, scope=Scope.REQUEST)
    get_message_page_handler = provide(GetMessagePageHandler, scope=Scope.REQUEST)
    get_message_handler = provide(GetMessageHandler, scope=Scope.REQUEST)
    get_unread_counts_handler = provide(GetUnreadCountsHandler, scope=Scope.REQUEST)
    get_unread_count_handler = provide(GetUnreadCountHandler, scope=Scope.REQUEST)


def create_container(config: Optional[type[Config]] = None) -> AsyncContainer:
    config = config or get_config()
    if config.STORAGE_BACKEND == "prisma":
        storage = prisma_storage_provider()
    else:
        storage = InMemoryStorageProvider()
    return make_async_container(storage, AppProvider(config))
