"""
List Conversations Query.

Returns every conversation of the user, newest activity first, with the
caller's unread count, the last message and one batched profile lookup for
all participants and last-message senders.
"""

from dataclasses import dataclass

from chat_service.application.common.interfaces import Query, QueryHandler
from chat_service.application.common.profiles import collect_profile_ids
from chat_service.application.services.conversation_manager import (
    ConversationManager,
    ConversationSummary,
)
from chat_service.application.services.profile_cache import ProfileBatch, ProfileCache
from chat_service.domain.value_objects import UserId


@dataclass
class ListConversationsResult:
    summaries: list[ConversationSummary]
    profiles: ProfileBatch


@dataclass(frozen=True)
class ListConversationsQuery(Query[ListConversationsResult]):
    user_id: UserId


class ListConversationsHandler(QueryHandler[ListConversationsResult]):
    def __init__(self, manager: ConversationManager, profile_cache: ProfileCache):
        self._manager = manager
        self._profile_cache = profile_cache

    async def execute(self, query: ListConversationsQuery) -> ListConversationsResult:
        summaries = await self._manager.list_for_user(query.user_id)
        user_uuids, business_uuids = collect_profile_ids(
            (p for s in summaries for p in s.participants),
            (s.last_message.sender_id for s in summaries if s.last_message),
        )
        profiles = await self._profile_cache.batch_fetch(user_uuids, business_uuids)
        return ListConversationsResult(summaries=summaries, profiles=profiles)
