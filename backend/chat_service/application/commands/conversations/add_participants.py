"""Add Participants Command - grow a group conversation (admins only)."""

from dataclasses import dataclass

from chat_service.application.common.interfaces import Command, CommandHandler
from chat_service.application.services.conversation_manager import ConversationManager
from chat_service.domain.entities.participant import Participant
from chat_service.domain.value_objects import ConversationId, UserId


@dataclass(frozen=True)
class AddParticipantsCommand(Command[list[Participant]]):
    conversation_id: ConversationId
    requesting_user_id: UserId
    user_ids: tuple[UserId, ...]


class AddParticipantsHandler(CommandHandler[list[Participant]]):
    def __init__(self, manager: ConversationManager):
        self._manager = manager

    async def execute(self, command: AddParticipantsCommand) -> list[Participant]:
        return await self._manager.add_participants(
            command.conversation_id, command.requesting_user_id, command.user_ids
        )
