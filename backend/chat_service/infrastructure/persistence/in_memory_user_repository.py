"""In-memory UserRepository with a unique kaha_id index."""

from dataclasses import replace
from typing import Optional

from chat_service.domain.entities.user import User
from chat_service.domain.exceptions import ConflictError
from chat_service.domain.ports.repositories import UserRepository
from chat_service.domain.value_objects import UserId
from chat_service.infrastructure.persistence.in_memory_database import InMemoryDatabase


class InMemoryUserRepository(UserRepository):
    def __init__(self, db: InMemoryDatabase):
        self._db = db

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        user = self._db.users.get(user_id)
        return replace(user) if user else None

    async def get_by_kaha_id(self, kaha_id: str) -> Optional[User]:
        user_id = self._db.kaha_ids.get(kaha_id)
        return replace(self._db.users[user_id]) if user_id else None

    async def save(self, user: User) -> None:
        holder = self._db.kaha_ids.get(user.kaha_id)
        if holder is not None and holder != user.id:
            raise ConflictError(f"kaha_id {user.kaha_id} belongs to another user")
        previous = self._db.users.get(user.id)
        if previous is not None and previous.kaha_id != user.kaha_id:
            self._db.kaha_ids.pop(previous.kaha_id, None)
        self._db.users[user.id] = replace(user)
        self._db.kaha_ids[user.kaha_id] = user.id
