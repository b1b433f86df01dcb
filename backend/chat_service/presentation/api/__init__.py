"""
API Routers - FastAPI endpoint definitions.
"""

from chat_service.presentation.api.conversations import router as conversations_router
from chat_service.presentation.api.messages import router as messages_router
from chat_service.presentation.api.notifications import router as notifications_router
from chat_service.presentation.api.realtime import router as realtime_router

__all__ = [
    "conversations_router",
    "messages_router",
    "notifications_router",
    "realtime_router",
]
