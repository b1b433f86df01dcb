"""
ParticipantRegistry - who belongs to a conversation, their unread counters and
read pointers, and which of them are currently connected.

Membership and counters live in the ParticipantRepository. Presence is
in-process only: user → {channel_id: channel}. A user may hold several
channels at once (multiple tabs/devices).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from chat_service.domain.entities.participant import Participant
from chat_service.domain.exceptions import NotFoundError, ValidationError
from chat_service.domain.ports.realtime_channel import RealtimeChannel
from chat_service.domain.ports.repositories import (
    MessageRepository,
    ParticipantRepository,
)
from chat_service.domain.value_objects import (
    ConversationId,
    ParticipantRole,
    UserId,
)

logger = logging.getLogger(__name__)


class ParticipantRegistry:
    def __init__(
        self,
        participant_repository: ParticipantRepository,
        message_repository: MessageRepository,
    ):
        self._participants = participant_repository
        self._messages = message_repository
        self._presence: dict[UserId, dict[str, RealtimeChannel]] = {}

    # ==================== MEMBERSHIP ====================

    async def is_participant(self, conversation_id: ConversationId, user_id: UserId) -> bool:
        return await self._participants.get(conversation_id, user_id) is not None

    async def get_participant(
        self, conversation_id: ConversationId, user_id: UserId
    ) -> Optional[Participant]:
        return await self._participants.get(conversation_id, user_id)

    async def participants_of(self, conversation_id: ConversationId) -> list[Participant]:
        return await self._participants.list_for_conversation(conversation_id)

    async def add_participants(
        self,
        conversation_id: ConversationId,
        user_ids: Iterable[UserId],
        role: ParticipantRole = ParticipantRole.MEMBER,
    ) -> list[Participant]:
        """
        Add users to an existing conversation. Existing members are skipped.

        New members start with their read pointer at the latest message so
        history sent before they joined never counts as unread.
        """
        latest = await self._messages.get_latest(conversation_id)
        start = latest.sequence if latest else 0
        joined = []
        for user_id in user_ids:
            participant = Participant.join(conversation_id, user_id, role)
            participant.last_read_sequence = start
            joined.append(participant)
        return await self._participants.add(joined)

    # ==================== UNREAD COUNTERS ====================

    async def increment_unread(
        self, conversation_id: ConversationId, sender_id: UserId
    ) -> int:
        """Add one to every participant's counter except the sender's."""
        touched = await self._participants.increment_unread(conversation_id, sender_id)
        logger.debug(
            f"[ParticipantRegistry] Incremented unread for {touched} participants in {conversation_id}"
        )
        return touched

    async def mark_read(
        self,
        conversation_id: ConversationId,
        user_id: UserId,
        up_to_sequence: int,
    ) -> bool:
        """
        Move the user's read pointer forward and reset their unread counter.

        Returns False (and changes nothing) when up_to_sequence is behind the
        current pointer. Raises NotFoundError for non-participants and
        ValidationError for a sequence the conversation has not reached yet.
        """
        if up_to_sequence < 0:
            raise ValidationError("up_to_sequence must not be negative")
        participant = await self._participants.get(conversation_id, user_id)
        if participant is None:
            raise NotFoundError("Conversation not found")
        latest = await self._messages.get_latest(conversation_id)
        latest_sequence = latest.sequence if latest else 0
        if up_to_sequence > latest_sequence:
            raise ValidationError(
                f"up_to_sequence {up_to_sequence} is past the latest message ({latest_sequence})"
            )
        if not participant.can_advance_to(up_to_sequence):
            return False
        return await self._participants.mark_read(
            conversation_id, user_id, up_to_sequence, datetime.now(timezone.utc)
        )

    async def unread_count(self, conversation_id: ConversationId, user_id: UserId) -> int:
        participant = await self._participants.get(conversation_id, user_id)
        if participant is None:
            raise NotFoundError("Conversation not found")
        return participant.unread_count

    async def unread_counts_for(self, user_id: UserId) -> dict[ConversationId, int]:
        memberships = await self._participants.list_for_user(user_id)
        return {p.conversation_id: p.unread_count for p in memberships}

    async def recompute_unread(
        self, conversation_id: ConversationId, user_id: UserId
    ) -> int:
        """Rebuild a counter from the message log after the read pointer."""
        participant = await self._participants.get(conversation_id, user_id)
        if participant is None:
            raise NotFoundError("Conversation not found")
        count = await self._messages.count_from_others_after(
            conversation_id, user_id, participant.last_read_sequence
        )
        if count != participant.unread_count:
            logger.info(
                f"[ParticipantRegistry] Repaired unread for {user_id} in {conversation_id}: "
                f"{participant.unread_count} -> {count}"
            )
            await self._participants.set_unread(conversation_id, user_id, count)
        return count

    async def set_muted(
        self, conversation_id: ConversationId, user_id: UserId, is_muted: bool
    ) -> bool:
        updated = await self._participants.set_muted(conversation_id, user_id, is_muted)
        if not updated:
            raise NotFoundError("Conversation not found")
        return is_muted

    # ==================== PRESENCE ====================

    def connect(self, user_id: UserId, channel: RealtimeChannel) -> None:
        self._presence.setdefault(user_id, {})[channel.channel_id] = channel
        logger.info(
            f"[ParticipantRegistry] {user_id} connected on {channel.channel_id} "
            f"({len(self._presence[user_id])} open)"
        )

    def disconnect(self, user_id: UserId, channel: RealtimeChannel) -> bool:
        channels = self._presence.get(user_id)
        if not channels or channels.pop(channel.channel_id, None) is None:
            return False
        if not channels:
            del self._presence[user_id]
        logger.info(f"[ParticipantRegistry] {user_id} disconnected from {channel.channel_id}")
        return True

    def channels_for(self, user_id: UserId) -> list[RealtimeChannel]:
        return list(self._presence.get(user_id, {}).values())

    def is_connected(self, user_id: UserId, channel: Optional[RealtimeChannel] = None) -> bool:
        channels = self._presence.get(user_id, {})
        if channel is None:
            return bool(channels)
        return channel.channel_id in channels

    def connected_users(self) -> list[UserId]:
        return list(self._presence)
