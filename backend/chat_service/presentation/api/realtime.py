"""
Realtime WebSocket endpoint.

    ws://host/ws?token=<jwt>

Client → server frames:
    {"event": "typing.start", "conversation_id": "..."}
    {"event": "typing.stop",  "conversation_id": "..."}
    {"event": "message.read", "conversation_id": "...", "up_to_sequence": 12}
    {"event": "heartbeat"}

Server → client events: connected, message.created, typing.update,
message.read, heartbeat.ack, error.

Close codes:
    4001: Authentication failed
"""

import json
from logging import getLogger
from typing import Any

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect

from chat_service.application.dto import events
from chat_service.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from chat_service.application.services.user_service import UserService
from chat_service.domain.exceptions import DomainError
from chat_service.domain.value_objects import ConversationId
from chat_service.infrastructure.realtime.websocket_channel import WebSocketChannel
from chat_service.presentation.dependencies.auth import AuthUser, authenticate_token

logger = getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, token: str = Query("")):
    container = websocket.app.state.dishka_container
    try:
        user = await authenticate_token(token, await container.get(UserService))
    except HTTPException as e:
        logger.warning(f"WebSocket authentication failed: {e.detail}")
        await websocket.close(code=4001, reason="Authentication failed")
        return

    dispatcher = await container.get(NotificationDispatcher)
    await websocket.accept()
    channel = WebSocketChannel(websocket)
    dispatcher.connect(user.user_id, channel)

    try:
        await channel.send(events.connected_event(user.user_id, channel.channel_id))
        while True:
            data = await websocket.receive_text()
            try:
                frame = json.loads(data)
                if not isinstance(frame, dict):
                    raise ValueError("frame must be an object")
            except ValueError:
                await channel.send(events.error_event("Invalid JSON format", "INVALID_JSON"))
                continue

            try:
                await _handle_frame(frame, user, dispatcher, channel)
            except DomainError as e:
                await channel.send(events.error_event(e.message, type(e).__name__))
            except (KeyError, TypeError, ValueError) as e:
                await channel.send(events.error_event(f"Invalid frame: {e}", "INVALID_MESSAGE"))

    except WebSocketDisconnect:
        logger.info(f"User {user.user_id} disconnected from WebSocket")
    finally:
        dispatcher.disconnect(channel)


async def _handle_frame(
    frame: dict[str, Any],
    user: AuthUser,
    dispatcher: NotificationDispatcher,
    channel: WebSocketChannel,
) -> None:
    event = frame.get("event")

    if event == events.HEARTBEAT:
        await channel.send(events.heartbeat_ack_event())

    elif event in (events.TYPING_START, events.TYPING_STOP):
        await dispatcher.publish_typing(
            ConversationId(frame["conversation_id"]),
            user.user_id,
            event == events.TYPING_START,
        )

    elif event == events.MESSAGE_READ:
        await dispatcher.publish_read_receipt(
            ConversationId(frame["conversation_id"]),
            user.user_id,
            int(frame["up_to_sequence"]),
        )

    else:
        await channel.send(events.error_event(f"Unknown event: {event}", "INVALID_ACTION"))
