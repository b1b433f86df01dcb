"""
UserService - keeps the local user record in step with the identity token.

Called on every authenticated request: the user is created on first contact and
its kaha_id is re-stamped when the external system has re-issued it.
"""

import logging

from chat_service.domain.entities.user import User
from chat_service.domain.ports.repositories import UserRepository
from chat_service.domain.value_objects import UserId

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, user_repository: UserRepository):
        self._users = user_repository

    async def ensure_user(self, user_id: UserId, kaha_id: str) -> User:
        user = await self._users.get_by_id(user_id)
        if user is None:
            user = User.create(user_id, kaha_id)
            await self._users.save(user)
            logger.info(f"[UserService] Created user {user_id}")
            return user
        if user.restamp_kaha_id(kaha_id):
            await self._users.save(user)
            logger.info(f"[UserService] Re-stamped kaha_id for user {user_id}")
        return user
