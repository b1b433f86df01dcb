"""Message-related commands."""

from chat_service.application.commands.messages.send_message import (
    SendMessageCommand,
    SendMessageHandler,
)

__all__ = ["SendMessageCommand", "SendMessageHandler"]
