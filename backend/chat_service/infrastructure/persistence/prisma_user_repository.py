"""Prisma User Repository Implementation."""

from typing import Optional

from prisma import Prisma
from prisma.errors import UniqueViolationError
from prisma.models import User as PrismaUser

from chat_service.domain.entities.user import User
from chat_service.domain.exceptions import ConflictError
from chat_service.domain.ports.repositories import UserRepository
from chat_service.domain.value_objects import UserId


class PrismaUserRepository(UserRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaUser) -> User:
        return User(
            id=UserId(record.id),
            kaha_id=record.kaha_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        record = await self._prisma.user.find_unique(where={"id": user_id.value})
        return self._to_entity(record) if record else None

    async def get_by_kaha_id(self, kaha_id: str) -> Optional[User]:
        record = await self._prisma.user.find_unique(where={"kaha_id": kaha_id})
        return self._to_entity(record) if record else None

    async def save(self, user: User) -> None:
        """Save (create or update) user."""
        try:
            await self._prisma.user.upsert(
                where={"id": user.id.value},
                data={
                    "create": {
                        "id": user.id.value,
                        "kaha_id": user.kaha_id,
                        "created_at": user.created_at,
                        "updated_at": user.updated_at,
                    },
                    "update": {
                        "kaha_id": user.kaha_id,
                        "updated_at": user.updated_at,
                    },
                },
            )
        except UniqueViolationError as e:
            raise ConflictError(f"kaha_id {user.kaha_id} belongs to another user") from e
