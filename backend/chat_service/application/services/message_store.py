"""
MessageStore - append-only, per-conversation ordered message log.

Sequence numbers are assigned inside MessageRepository.append in the same step
as the insert. Within one conversation they start at 1 and have no gaps, which
is what makes the sequence a usable pagination cursor.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from chat_service.application.services.participant_registry import ParticipantRegistry
from chat_service.domain.entities.message import Message, MessageDraft
from chat_service.domain.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from chat_service.domain.ports.repositories import (
    ConversationRepository,
    MessageRepository,
)
from chat_service.domain.value_objects import (
    ConversationId,
    MessageCursor,
    MessageId,
    MessageType,
    UserId,
)
from chat_service.utils.sanitizer import sanitize_message_content

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessagePage:
    messages: list[Message]  # newest first
    next_cursor: Optional[MessageCursor]


class MessageStore:
    def __init__(
        self,
        message_repository: MessageRepository,
        conversation_repository: ConversationRepository,
        registry: ParticipantRegistry,
        page_default: int = 50,
        page_max: int = 100,
        max_length: int = 4000,
        max_attempts: int = 3,
        retry_delay: float = 0.01,
    ):
        self._messages = message_repository
        self._conversations = conversation_repository
        self._registry = registry
        self._page_default = page_default
        self._page_max = page_max
        self._max_length = max_length
        self._max_attempts = max(1, max_attempts)
        self._retry_delay = retry_delay

    def clean_content(self, content: Optional[str]) -> str:
        cleaned = sanitize_message_content(content)
        if not cleaned:
            raise ValidationError("Message content cannot be empty")
        if len(cleaned) > self._max_length:
            raise ValidationError(
                f"Message content exceeds {self._max_length} characters"
            )
        return cleaned

    async def append(
        self,
        conversation_id: ConversationId,
        sender_id: UserId,
        content: str,
        type: MessageType = MessageType.TEXT,
    ) -> Message:
        if not await self._registry.is_participant(conversation_id, sender_id):
            raise ForbiddenError("Sender is not a participant of this conversation")
        cleaned = self.clean_content(content)
        draft = MessageDraft.create(conversation_id, sender_id, cleaned, type)

        attempt = 1
        while True:
            try:
                message = await self._messages.append(draft)
                break
            except ConflictError:
                if attempt >= self._max_attempts:
                    logger.warning(
                        f"[MessageStore] Giving up on append to {conversation_id} "
                        f"after {attempt} attempts"
                    )
                    raise
                logger.info(
                    f"[MessageStore] Sequence conflict in {conversation_id}, retrying ({attempt})"
                )
                await asyncio.sleep(self._retry_delay * attempt)
                attempt += 1

        await self._conversations.touch(conversation_id, message.created_at)
        logger.debug(
            f"[MessageStore] Appended {message.id} as #{message.sequence} in {conversation_id}"
        )
        return message

    async def page(
        self,
        conversation_id: ConversationId,
        cursor: Optional[MessageCursor] = None,
        limit: Optional[int] = None,
    ) -> MessagePage:
        if limit is None:
            limit = self._page_default
        if limit < 1:
            raise ValidationError("limit must be at least 1")
        limit = min(limit, self._page_max)

        before = cursor.before_sequence if cursor else None
        messages = await self._messages.page(conversation_id, before, limit)
        # Sequences are gap-free, so reaching #1 means history is exhausted
        next_cursor = None
        if messages and messages[-1].sequence > 1:
            next_cursor = MessageCursor(messages[-1].sequence)
        return MessagePage(messages=messages, next_cursor=next_cursor)

    async def iter_history(
        self, conversation_id: ConversationId, batch_size: Optional[int] = None
    ) -> AsyncIterator[Message]:
        """Walk the whole history newest to oldest, one page at a time."""
        cursor = None
        while True:
            page = await self.page(conversation_id, cursor, batch_size)
            for message in page.messages:
                yield message
            if page.next_cursor is None:
                return
            cursor = page.next_cursor

    async def get(self, message_id: MessageId) -> Message:
        message = await self._messages.get_by_id(message_id)
        if message is None:
            raise NotFoundError("Message not found")
        return message

    async def last_message(self, conversation_id: ConversationId) -> Optional[Message]:
        return await self._messages.get_latest(conversation_id)

    async def latest_sequence(self, conversation_id: ConversationId) -> int:
        latest = await self._messages.get_latest(conversation_id)
        return latest.sequence if latest else 0
