"""
Get Message Page Query - one page of history, newest first.

Non-participants get NotFoundError, the same as for a missing conversation.
"""

from dataclasses import dataclass
from typing import Optional

from chat_service.application.common.interfaces import Query, QueryHandler
from chat_service.application.common.profiles import collect_profile_ids
from chat_service.application.services.conversation_manager import ConversationManager
from chat_service.application.services.message_store import MessagePage, MessageStore
from chat_service.application.services.profile_cache import ProfileBatch, ProfileCache
from chat_service.domain.value_objects import ConversationId, MessageCursor, UserId


@dataclass
class GetMessagePageResult:
    page: MessagePage
    profiles: ProfileBatch
    business_ids: frozenset[str]


@dataclass(frozen=True)
class GetMessagePageQuery(Query[GetMessagePageResult]):
    conversation_id: ConversationId
    user_id: UserId
    cursor: Optional[MessageCursor] = None
    limit: Optional[int] = None


class GetMessagePageHandler(QueryHandler[GetMessagePageResult]):
    def __init__(
        self,
        manager: ConversationManager,
        message_store: MessageStore,
        profile_cache: ProfileCache,
    ):
        self._manager = manager
        self._message_store = message_store
        self._profile_cache = profile_cache

    async def execute(self, query: GetMessagePageQuery) -> GetMessagePageResult:
        details = await self._manager.get(query.conversation_id, query.user_id)
        page = await self._message_store.page(query.conversation_id, query.cursor, query.limit)
        user_uuids, business_uuids = collect_profile_ids(
            details.participants, (m.sender_id for m in page.messages)
        )
        profiles = await self._profile_cache.batch_fetch(user_uuids, business_uuids)
        return GetMessagePageResult(
            page=page, profiles=profiles, business_ids=frozenset(business_uuids)
        )
