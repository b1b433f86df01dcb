"""
Create Direct Conversation Command.

Idempotent per unordered pair: calling it again (from either side) returns the
existing conversation.
"""

from dataclasses import dataclass

from chat_service.application.common.interfaces import Command, CommandHandler
from chat_service.application.services.conversation_manager import ConversationManager
from chat_service.domain.entities.conversation import Conversation
from chat_service.domain.value_objects import UserId


@dataclass(frozen=True)
class CreateDirectConversationCommand(Command[Conversation]):
    creator_id: UserId
    target_user_id: UserId


class CreateDirectConversationHandler(CommandHandler[Conversation]):
    def __init__(self, manager: ConversationManager):
        self._manager = manager

    async def execute(self, command: CreateDirectConversationCommand) -> Conversation:
        return await self._manager.create_direct(command.creator_id, command.target_user_id)
