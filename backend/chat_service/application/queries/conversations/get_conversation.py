"""Get Conversation Query - one conversation with its participants."""

from dataclasses import dataclass

from chat_service.application.common.interfaces import Query, QueryHandler
from chat_service.application.common.profiles import collect_profile_ids
from chat_service.application.services.conversation_manager import (
    ConversationDetails,
    ConversationManager,
)
from chat_service.application.services.profile_cache import ProfileBatch, ProfileCache
from chat_service.domain.value_objects import ConversationId, UserId


@dataclass
class GetConversationResult:
    details: ConversationDetails
    unread_count: int
    profiles: ProfileBatch


@dataclass(frozen=True)
class GetConversationQuery(Query[GetConversationResult]):
    conversation_id: ConversationId
    user_id: UserId


class GetConversationHandler(QueryHandler[GetConversationResult]):
    def __init__(self, manager: ConversationManager, profile_cache: ProfileCache):
        self._manager = manager
        self._profile_cache = profile_cache

    async def execute(self, query: GetConversationQuery) -> GetConversationResult:
        details = await self._manager.get(query.conversation_id, query.user_id)
        own = next(p for p in details.participants if p.user_id == query.user_id)
        user_uuids, business_uuids = collect_profile_ids(details.participants)
        profiles = await self._profile_cache.batch_fetch(user_uuids, business_uuids)
        return GetConversationResult(
            details=details, unread_count=own.unread_count, profiles=profiles
        )
