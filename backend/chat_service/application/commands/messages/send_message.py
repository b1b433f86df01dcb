"""
SendMessage Command - append a message and fan it out.

Steps:
1. MessageStore.append (participant check, sanitizing, sequence assignment)
2. ParticipantRegistry.increment_unread for everyone but the sender
3. NotificationDispatcher.publish_message to connected participants

Steps 1-2 are the durable outcome. A failure in step 3 is logged only: offline
or unreachable clients catch up through history and unread counters.
"""

import logging
from dataclasses import dataclass

from chat_service.application.common.interfaces import Command, CommandHandler
from chat_service.application.services.message_store import MessageStore
from chat_service.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from chat_service.application.services.participant_registry import ParticipantRegistry
from chat_service.domain.entities.message import Message
from chat_service.domain.value_objects import ConversationId, MessageType, UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendMessageCommand(Command[Message]):
    conversation_id: ConversationId
    sender_id: UserId
    content: str
    type: MessageType = MessageType.TEXT


class SendMessageHandler(CommandHandler[Message]):
    def __init__(
        self,
        message_store: MessageStore,
        registry: ParticipantRegistry,
        dispatcher: NotificationDispatcher,
    ):
        self._message_store = message_store
        self._registry = registry
        self._dispatcher = dispatcher

    async def execute(self, command: SendMessageCommand) -> Message:
        message = await self._message_store.append(
            command.conversation_id, command.sender_id, command.content, command.type
        )
        await self._registry.increment_unread(command.conversation_id, command.sender_id)
        try:
            await self._dispatcher.publish_message(message)
        except Exception as e:
            logger.error(f"[SendMessage] Notify failed for message {message.id}: {e}")
        return message
