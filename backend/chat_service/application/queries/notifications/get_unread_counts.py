"""Get Unread Counts Query - the caller's counter for every conversation."""

from dataclasses import dataclass

from chat_service.application.common.interfaces import Query, QueryHandler
from chat_service.application.services.participant_registry import ParticipantRegistry
from chat_service.domain.value_objects import ConversationId, UserId


@dataclass
class UnreadCounts:
    user_id: UserId
    counts: dict[ConversationId, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())


@dataclass(frozen=True)
class GetUnreadCountsQuery(Query[UnreadCounts]):
    user_id: UserId


class GetUnreadCountsHandler(QueryHandler[UnreadCounts]):
    def __init__(self, registry: ParticipantRegistry):
        self._registry = registry

    async def execute(self, query: GetUnreadCountsQuery) -> UnreadCounts:
        counts = await self._registry.unread_counts_for(query.user_id)
        return UnreadCounts(user_id=query.user_id, counts=counts)
