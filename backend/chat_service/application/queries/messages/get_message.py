"""Get Message Query - a single message, visible to participants only."""

from dataclasses import dataclass

from chat_service.application.common.interfaces import Query, QueryHandler
from chat_service.application.services.message_store import MessageStore
from chat_service.application.services.participant_registry import ParticipantRegistry
from chat_service.domain.entities.message import Message
from chat_service.domain.exceptions import NotFoundError
from chat_service.domain.value_objects import MessageId, UserId


@dataclass(frozen=True)
class GetMessageQuery(Query[Message]):
    message_id: MessageId
    user_id: UserId


class GetMessageHandler(QueryHandler[Message]):
    def __init__(self, message_store: MessageStore, registry: ParticipantRegistry):
        self._message_store = message_store
        self._registry = registry

    async def execute(self, query: GetMessageQuery) -> Message:
        message = await self._message_store.get(query.message_id)
        if not await self._registry.is_participant(message.conversation_id, query.user_id):
            raise NotFoundError("Message not found")
        return message
