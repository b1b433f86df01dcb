"""
MarkRead Command - advance the caller's read pointer.

Without an explicit sequence the pointer moves to the conversation's latest
message. Acks behind the current pointer are ignored (advanced=False).
"""

from dataclasses import dataclass
from typing import Optional

from chat_service.application.common.interfaces import Command, CommandHandler
from chat_service.application.services.message_store import MessageStore
from chat_service.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from chat_service.application.services.participant_registry import ParticipantRegistry
from chat_service.domain.exceptions import NotFoundError
from chat_service.domain.value_objects import ConversationId, UserId


@dataclass
class MarkReadResult:
    conversation_id: ConversationId
    up_to_sequence: int
    advanced: bool


@dataclass(frozen=True)
class MarkReadCommand(Command[MarkReadResult]):
    conversation_id: ConversationId
    user_id: UserId
    up_to_sequence: Optional[int] = None


class MarkReadHandler(CommandHandler[MarkReadResult]):
    def __init__(
        self,
        registry: ParticipantRegistry,
        message_store: MessageStore,
        dispatcher: NotificationDispatcher,
    ):
        self._registry = registry
        self._message_store = message_store
        self._dispatcher = dispatcher

    async def execute(self, command: MarkReadCommand) -> MarkReadResult:
        if not await self._registry.is_participant(command.conversation_id, command.user_id):
            raise NotFoundError("Conversation not found")
        sequence = command.up_to_sequence
        if sequence is None:
            sequence = await self._message_store.latest_sequence(command.conversation_id)
        advanced = await self._dispatcher.publish_read_receipt(
            command.conversation_id, command.user_id, sequence
        )
        return MarkReadResult(
            conversation_id=command.conversation_id,
            up_to_sequence=sequence,
            advanced=advanced,
        )
