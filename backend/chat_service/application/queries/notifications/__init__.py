"""Notification-related queries."""

from chat_service.application.queries.notifications.get_unread_counts import (
    GetUnreadCountsHandler,
    GetUnreadCountsQuery,
    UnreadCounts,
)
from chat_service.application.queries.notifications.get_unread_count import (
    GetUnreadCountHandler,
    GetUnreadCountQuery,
)

__all__ = [
    "GetUnreadCountsHandler",
    "GetUnreadCountsQuery",
    "UnreadCounts",
    "GetUnreadCountHandler",
    "GetUnreadCountQuery",
]
