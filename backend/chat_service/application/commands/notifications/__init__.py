"""Notification-related commands."""

from chat_service.application.commands.notifications.mark_read import (
    MarkReadCommand,
    MarkReadHandler,
    MarkReadResult,
)
from chat_service.application.commands.notifications.set_mute import (
    SetMuteCommand,
    SetMuteHandler,
)

__all__ = [
    "MarkReadCommand",
    "MarkReadHandler",
    "MarkReadResult",
    "SetMuteCommand",
    "SetMuteHandler",
]
