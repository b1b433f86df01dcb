"""
ConversationManager - creates and fetches conversations.

Membership rules are enforced here at creation time:
- direct   → exactly the two distinct users, one conversation per unordered pair
- group    → at least 3 distinct participants, creator is admin
- business → requester (customer) + the business placeholder participant

The manager never deletes conversations or removes participants.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from chat_service.application.services.message_store import MessageStore
from chat_service.application.services.participant_registry import ParticipantRegistry
from chat_service.domain.entities.conversation import Conversation
from chat_service.domain.entities.message import Message
from chat_service.domain.entities.participant import Participant
from chat_service.domain.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from chat_service.domain.ports.repositories import ConversationRepository
from chat_service.domain.value_objects import (
    BusinessId,
    ConversationId,
    ConversationType,
    MessageType,
    ParticipantRole,
    UserId,
)
from chat_service.utils.sanitizer import sanitize_display_name

logger = logging.getLogger(__name__)

MIN_GROUP_SIZE = 3


@dataclass
class ConversationDetails:
    conversation: Conversation
    participants: list[Participant]


@dataclass
class ConversationSummary:
    conversation: Conversation
    participants: list[Participant]
    unread_count: int
    last_message: Optional[Message]


@dataclass
class BusinessConversation:
    conversation: Conversation
    initial_message: Optional[Message] = None


class ConversationManager:
    def __init__(
        self,
        conversation_repository: ConversationRepository,
        registry: ParticipantRegistry,
        message_store: MessageStore,
        user_limit: Optional[int] = None,
    ):
        self._conversations = conversation_repository
        self._registry = registry
        self._messages = message_store
        self._user_limit = user_limit

    async def create_direct(self, creator_id: UserId, target_user_id: UserId) -> Conversation:
        if creator_id == target_user_id:
            raise ValidationError("Cannot start a direct conversation with yourself")

        key = Conversation.direct_pair_key(creator_id, target_user_id)
        existing = await self._conversations.get_direct(key)
        if existing is not None:
            return existing

        conversation = Conversation.create_direct(creator_id, target_user_id)
        participants = [
            Participant.join(conversation.id, creator_id),
            Participant.join(conversation.id, target_user_id),
        ]
        try:
            await self._conversations.create(conversation, participants)
        except ConflictError:
            # Lost the race for this pair; the winner's conversation is the one
            winner = await self._conversations.get_direct(key)
            if winner is None:
                raise
            logger.info(f"[ConversationManager] Direct pair {key} created concurrently")
            return winner

        logger.info(f"[ConversationManager] Created direct conversation {conversation.id}")
        return conversation

    async def create_group(
        self,
        creator_id: UserId,
        participant_ids: Iterable[UserId],
        name: Optional[str] = None,
    ) -> Conversation:
        members = _distinct(participant_ids, exclude=creator_id)
        if 1 + len(members) < MIN_GROUP_SIZE:
            raise ValidationError(
                f"group requires at least {MIN_GROUP_SIZE} participants"
            )

        conversation = Conversation.create_group(sanitize_display_name(name))
        participants = [Participant.join(conversation.id, creator_id, ParticipantRole.ADMIN)]
        participants += [Participant.join(conversation.id, uid) for uid in members]
        await self._conversations.create(conversation, participants)

        logger.info(
            f"[ConversationManager] Created group {conversation.id} with {len(participants)} participants"
        )
        return conversation

    async def create_business(
        self,
        creator_id: UserId,
        business_id: BusinessId,
        initial_message: Optional[str] = None,
        name: Optional[str] = None,
    ) -> BusinessConversation:
        placeholder = business_id.as_participant()
        if placeholder == creator_id:
            raise ValidationError("A business cannot open a conversation with itself")
        content = None
        if initial_message is not None:
            content = self._messages.clean_content(initial_message)

        conversation = Conversation.create_business(business_id, sanitize_display_name(name))
        participants = [
            Participant.join(conversation.id, creator_id, ParticipantRole.CUSTOMER),
            Participant.join(conversation.id, placeholder, ParticipantRole.BUSINESS),
        ]
        await self._conversations.create(conversation, participants)
        logger.info(
            f"[ConversationManager] Created business conversation {conversation.id} with {business_id}"
        )

        result = BusinessConversation(conversation=conversation)
        if content is None:
            return result

        # Not rolled back on failure: the conversation exists without its first message
        try:
            message = await self._messages.append(
                conversation.id, creator_id, content, MessageType.TEXT
            )
            await self._registry.increment_unread(conversation.id, creator_id)
        except DomainError as e:
            logger.warning(
                f"[ConversationManager] Initial message for {conversation.id} failed: {e.message}"
            )
            return result
        conversation.touch(message.created_at)
        result.initial_message = message
        return result

    async def list_for_user(self, user_id: UserId) -> list[ConversationSummary]:
        conversations = await self._conversations.get_for_user(user_id, self._user_limit)
        return list(
            await asyncio.gather(*(self._summarize(c, user_id) for c in conversations))
        )

    async def get(
        self, conversation_id: ConversationId, requesting_user_id: UserId
    ) -> ConversationDetails:
        conversation = await self._conversations.get_by_id(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")
        participants = await self._registry.participants_of(conversation_id)
        if not any(p.user_id == requesting_user_id for p in participants):
            raise NotFoundError("Conversation not found")
        return ConversationDetails(conversation=conversation, participants=participants)

    async def participants(self, conversation_id: ConversationId) -> list[Participant]:
        return await self._registry.participants_of(conversation_id)

    async def add_participants(
        self,
        conversation_id: ConversationId,
        requesting_user_id: UserId,
        user_ids: Iterable[UserId],
    ) -> list[Participant]:
        details = await self.get(conversation_id, requesting_user_id)
        if details.conversation.type is not ConversationType.GROUP:
            raise ValidationError("Participants can only be added to group conversations")
        requester = next(p for p in details.participants if p.user_id == requesting_user_id)
        if requester.role is not ParticipantRole.ADMIN:
            raise ForbiddenError("Only group admins can add participants")

        present = {p.user_id for p in details.participants}
        new_ids = [uid for uid in _distinct(user_ids) if uid not in present]
        if not new_ids:
            return []
        added = await self._registry.add_participants(conversation_id, new_ids)
        logger.info(
            f"[ConversationManager] Added {len(added)} participants to group {conversation_id}"
        )
        return added

    async def _summarize(
        self, conversation: Conversation, user_id: UserId
    ) -> ConversationSummary:
        participants, last_message = await asyncio.gather(
            self._registry.participants_of(conversation.id),
            self._messages.last_message(conversation.id),
        )
        own = next((p for p in participants if p.user_id == user_id), None)
        return ConversationSummary(
            conversation=conversation,
            participants=participants,
            unread_count=own.unread_count if own else 0,
            last_message=last_message,
        )


def _distinct(user_ids: Iterable[UserId], exclude: Optional[UserId] = None) -> list[UserId]:
    seen: list[UserId] = []
    for uid in user_ids:
        if uid != exclude and uid not in seen:
            seen.append(uid)
    return seen
