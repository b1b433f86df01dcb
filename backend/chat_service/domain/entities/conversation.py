"""
Conversation Entity - a direct, group or business conversation.

The conversation row itself carries no membership; participants are stored
separately and owned by the conversation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from chat_service.domain.value_objects.business_id import BusinessId
from chat_service.domain.value_objects.conversation_id import ConversationId
from chat_service.domain.value_objects.conversation_type import ConversationType
from chat_service.domain.value_objects.user_id import UserId


@dataclass
class Conversation:
    id: ConversationId
    type: ConversationType
    created_at: datetime
    last_activity: Optional[datetime] = None
    name: Optional[str] = None
    business_id: Optional[BusinessId] = None
    # Sorted "a:b" user pair, set only for direct conversations. Unique in storage.
    direct_key: Optional[str] = None

    def __post_init__(self):
        if self.last_activity is None:
            self.last_activity = self.created_at
        if self.type is ConversationType.DIRECT:
            if self.name is not None:
                raise ValueError("Direct conversations cannot be named")
            if not self.direct_key:
                raise ValueError("Direct conversations require a pair key")
        if self.type is ConversationType.BUSINESS and self.business_id is None:
            raise ValueError("Business conversations require a business_id")
        if self.type is not ConversationType.BUSINESS and self.business_id is not None:
            raise ValueError("Only business conversations reference a business")

    @staticmethod
    def direct_pair_key(first: UserId, second: UserId) -> str:
        """Order-independent key for a pair of users."""
        low, high = sorted((first.value, second.value))
        return f"{low}:{high}"

    @classmethod
    def create_direct(cls, first: UserId, second: UserId) -> Conversation:
        now = datetime.now(timezone.utc)
        return cls(
            id=ConversationId.generate(),
            type=ConversationType.DIRECT,
            created_at=now,
            direct_key=cls.direct_pair_key(first, second),
        )

    @classmethod
    def create_group(cls, name: Optional[str]) -> Conversation:
        now = datetime.now(timezone.utc)
        return cls(
            id=ConversationId.generate(),
            type=ConversationType.GROUP,
            created_at=now,
            name=name,
        )

    @classmethod
    def create_business(
        cls, business_id: BusinessId, name: Optional[str] = None
    ) -> Conversation:
        now = datetime.now(timezone.utc)
        return cls(
            id=ConversationId.generate(),
            type=ConversationType.BUSINESS,
            created_at=now,
            name=name,
            business_id=business_id,
        )

    def touch(self, at: datetime) -> None:
        if at > self.last_activity:
            self.last_activity = at
