"""
NotificationDispatcher - pushes realtime events to connected participants.

Each client channel moves through
    DISCONNECTED → CONNECTED → (TYPING | IDLE) → DISCONNECTED
and is registered in ParticipantRegistry's presence map while connected.

Delivery is best-effort and per-recipient: one broken channel is logged and
deregistered without affecting delivery to the others. Nothing is queued for
offline users; they catch up through history and unread counters.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from chat_service.application.dto import events
from chat_service.application.services.participant_registry import ParticipantRegistry
from chat_service.domain.entities.message import Message
from chat_service.domain.exceptions import NotFoundError
from chat_service.domain.ports.realtime_channel import RealtimeChannel
from chat_service.domain.value_objects import ConversationId, UserId

logger = logging.getLogger(__name__)


class ClientState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    TYPING = "typing"
    IDLE = "idle"


@dataclass
class ClientSession:
    user_id: UserId
    channel: RealtimeChannel
    state: ClientState = ClientState.CONNECTED
    typing_in: Optional[ConversationId] = None
    typing_expires_at: float = 0.0


class NotificationDispatcher:
    def __init__(
        self,
        registry: ParticipantRegistry,
        typing_timeout: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._registry = registry
        self._typing_timeout = typing_timeout
        self._clock = clock
        self._sessions: dict[str, ClientSession] = {}

    # ==================== CONNECTION LIFECYCLE ====================

    def connect(self, user_id: UserId, channel: RealtimeChannel) -> ClientSession:
        session = ClientSession(user_id=user_id, channel=channel)
        self._sessions[channel.channel_id] = session
        self._registry.connect(user_id, channel)
        return session

    def disconnect(self, channel: RealtimeChannel) -> None:
        session = self._sessions.pop(channel.channel_id, None)
        if session is None:
            return
        session.state = ClientState.DISCONNECTED
        self._registry.disconnect(session.user_id, channel)

    def state_of(self, channel: RealtimeChannel) -> ClientState:
        session = self._sessions.get(channel.channel_id)
        if session is None:
            return ClientState.DISCONNECTED
        if session.state is ClientState.TYPING and self._clock() >= session.typing_expires_at:
            session.state = ClientState.IDLE
            session.typing_in = None
        return session.state

    # ==================== PUBLISHING ====================

    async def publish_message(self, message: Message) -> int:
        """Send message.created to every connected participant, sender included."""
        participants = await self._registry.participants_of(message.conversation_id)
        delivered = await self._fan_out(
            (p.user_id for p in participants), events.message_created_event(message)
        )
        logger.debug(
            f"[NotificationDispatcher] message {message.id} delivered to {delivered} channel(s)"
        )
        return delivered

    async def publish_typing(
        self, conversation_id: ConversationId, user_id: UserId, is_typing: bool
    ) -> int:
        if not await self._registry.is_participant(conversation_id, user_id):
            raise NotFoundError("Conversation not found")

        expires_at = self._clock() + self._typing_timeout
        for channel in self._registry.channels_for(user_id):
            session = self._sessions.get(channel.channel_id)
            if session is None:
                continue
            if is_typing:
                session.state = ClientState.TYPING
                session.typing_in = conversation_id
                session.typing_expires_at = expires_at
            else:
                session.state = ClientState.IDLE
                session.typing_in = None

        participants = await self._registry.participants_of(conversation_id)
        return await self._fan_out(
            (p.user_id for p in participants if p.user_id != user_id),
            events.typing_event(conversation_id, user_id, is_typing),
        )

    async def publish_read_receipt(
        self, conversation_id: ConversationId, user_id: UserId, up_to_sequence: int
    ) -> bool:
        """Advance the read pointer; notify the others only if it actually moved."""
        advanced = await self._registry.mark_read(conversation_id, user_id, up_to_sequence)
        if not advanced:
            return False
        participants = await self._registry.participants_of(conversation_id)
        await self._fan_out(
            (p.user_id for p in participants if p.user_id != user_id),
            events.read_receipt_event(conversation_id, user_id, up_to_sequence),
        )
        return True

    async def _fan_out(self, user_ids: Iterable[UserId], event: dict[str, Any]) -> int:
        targets = [
            (user_id, channel)
            for user_id in user_ids
            for channel in self._registry.channels_for(user_id)
        ]
        if not targets:
            return 0
        results = await asyncio.gather(
            *(self._deliver(user_id, channel, event) for user_id, channel in targets),
            return_exceptions=True,
        )
        return sum(1 for result in results if result is True)

    async def _deliver(
        self, user_id: UserId, channel: RealtimeChannel, event: dict[str, Any]
    ) -> bool:
        # Channel may have disconnected while earlier deliveries were awaited
        if not self._registry.is_connected(user_id, channel):
            return False
        try:
            await channel.send(event)
        except Exception as e:
            logger.warning(
                f"[NotificationDispatcher] Dropping channel {channel.channel_id} of {user_id}: {e}"
            )
            self.disconnect(channel)
            self._registry.disconnect(user_id, channel)
            return False
        return True
