"""Get Unread Count Query - the caller's counter for one conversation."""

from dataclasses import dataclass

from chat_service.application.common.interfaces import Query, QueryHandler
from chat_service.application.services.participant_registry import ParticipantRegistry
from chat_service.domain.value_objects import ConversationId, UserId


@dataclass(frozen=True)
class GetUnreadCountQuery(Query[int]):
    conversation_id: ConversationId
    user_id: UserId


class GetUnreadCountHandler(QueryHandler[int]):
    def __init__(self, registry: ParticipantRegistry):
        self._registry = registry

    async def execute(self, query: GetUnreadCountQuery) -> int:
        return await self._registry.unread_count(query.conversation_id, query.user_id)
