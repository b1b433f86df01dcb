from enum import Enum


class ConversationType(str, Enum):
    """Conversation kind. Immutable once the conversation exists."""

    DIRECT = "direct"
    GROUP = "group"
    BUSINESS = "business"
