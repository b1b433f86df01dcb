"""
User Entity - a system user known by internal id and external kaha id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from chat_service.domain.value_objects.user_id import UserId


@dataclass
class User:
    id: UserId
    kaha_id: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        if not self.kaha_id:
            raise ValueError("kaha_id cannot be empty")

    @classmethod
    def create(cls, user_id: UserId, kaha_id: str) -> User:
        now = datetime.now(timezone.utc)
        return cls(id=user_id, kaha_id=kaha_id, created_at=now, updated_at=now)

    def restamp_kaha_id(self, kaha_id: str) -> bool:
        """Point the user at the external system's current id. Returns True if changed."""
        if not kaha_id:
            raise ValueError("kaha_id cannot be empty")
        if kaha_id == self.kaha_id:
            return False
        self.kaha_id = kaha_id
        self.updated_at = datetime.now(timezone.utc)
        return True
