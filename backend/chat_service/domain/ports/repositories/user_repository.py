"""
User Repository Port - Interface for user persistence.
"""

from abc import ABC, abstractmethod
from typing import Optional

from chat_service.domain.entities.user import User
from chat_service.domain.value_objects.user_id import UserId


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> Optional[User]: ...

    @abstractmethod
    async def get_by_kaha_id(self, kaha_id: str) -> Optional[User]: ...

    @abstractmethod
    async def save(self, user: User) -> None:
        """Create or update. Raises ConflictError if kaha_id belongs to another user."""
        ...
