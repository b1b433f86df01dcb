"""
Create Business Conversation Command.

Creates the requester ↔ business conversation and, when given, appends the
initial message and pushes it to connected participants.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from chat_service.application.common.interfaces import Command, CommandHandler
from chat_service.application.services.conversation_manager import (
    BusinessConversation,
    ConversationManager,
)
from chat_service.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from chat_service.domain.value_objects import BusinessId, UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateBusinessConversationCommand(Command[BusinessConversation]):
    creator_id: UserId
    business_id: BusinessId
    initial_message: Optional[str] = None
    name: Optional[str] = None


class CreateBusinessConversationHandler(CommandHandler[BusinessConversation]):
    def __init__(self, manager: ConversationManager, dispatcher: NotificationDispatcher):
        self._manager = manager
        self._dispatcher = dispatcher

    async def execute(
        self, command: CreateBusinessConversationCommand
    ) -> BusinessConversation:
        result = await self._manager.create_business(
            command.creator_id,
            command.business_id,
            command.initial_message,
            command.name,
        )
        if result.initial_message is not None:
            try:
                await self._dispatcher.publish_message(result.initial_message)
            except Exception as e:
                logger.error(
                    f"[CreateBusinessConversation] Notify failed for {result.conversation.id}: {e}"
                )
        return result
