"""Create Group Conversation Command."""

from dataclasses import dataclass
from typing import Optional

from chat_service.application.common.interfaces import Command, CommandHandler
from chat_service.application.services.conversation_manager import ConversationManager
from chat_service.domain.entities.conversation import Conversation
from chat_service.domain.value_objects import UserId


@dataclass(frozen=True)
class CreateGroupConversationCommand(Command[Conversation]):
    creator_id: UserId
    participant_ids: tuple[UserId, ...]
    name: Optional[str] = None


class CreateGroupConversationHandler(CommandHandler[Conversation]):
    def __init__(self, manager: ConversationManager):
        self._manager = manager

    async def execute(self, command: CreateGroupConversationCommand) -> Conversation:
        return await self._manager.create_group(
            command.creator_id, command.participant_ids, command.name
        )
