"""SetMute Command - toggle notifications for one conversation."""

from dataclasses import dataclass

from chat_service.application.common.interfaces import Command, CommandHandler
from chat_service.application.services.participant_registry import ParticipantRegistry
from chat_service.domain.value_objects import ConversationId, UserId


@dataclass(frozen=True)
class SetMuteCommand(Command[bool]):
    conversation_id: ConversationId
    user_id: UserId
    is_muted: bool


class SetMuteHandler(CommandHandler[bool]):
    def __init__(self, registry: ParticipantRegistry):
        self._registry = registry

    async def execute(self, command: SetMuteCommand) -> bool:
        return await self._registry.set_muted(
            command.conversation_id, command.user_id, command.is_muted
        )
