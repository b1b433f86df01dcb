"""Message-related queries."""

from chat_service.application.queries.messages.get_message_page import (
    GetMessagePageHandler,
    GetMessagePageQuery,
    GetMessagePageResult,
)
from chat_service.application.queries.messages.get_message import (
    GetMessageHandler,
    GetMessageQuery,
)

__all__ = [
    "GetMessagePageHandler",
    "GetMessagePageQuery",
    "GetMessagePageResult",
    "GetMessageHandler",
    "GetMessageQuery",
]
