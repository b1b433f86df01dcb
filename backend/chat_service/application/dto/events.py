"""
Realtime event envelopes pushed over client channels.

Every outbound frame is {"event": <name>, "data": {...}} with JSON-safe values.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from chat_service.application.dto.message import MessageDTO
from chat_service.domain.entities.message import Message
from chat_service.domain.value_objects import ConversationId, UserId

CONNECTED = "connected"
MESSAGE_CREATED = "message.created"
TYPING_UPDATE = "typing.update"
MESSAGE_READ = "message.read"
HEARTBEAT_ACK = "heartbeat.ack"
ERROR = "error"

# Inbound client frames
TYPING_START = "typing.start"
TYPING_STOP = "typing.stop"
HEARTBEAT = "heartbeat"


def envelope(event: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"event": event, "data": data}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def connected_event(user_id: UserId, channel_id: str) -> dict[str, Any]:
    return envelope(
        CONNECTED,
        {"user_id": user_id.value, "channel_id": channel_id, "timestamp": _now()},
    )


def message_created_event(message: Message) -> dict[str, Any]:
    return envelope(
        MESSAGE_CREATED, MessageDTO.from_entity(message).model_dump(mode="json")
    )


def typing_event(
    conversation_id: ConversationId, user_id: UserId, is_typing: bool
) -> dict[str, Any]:
    return envelope(
        TYPING_UPDATE,
        {
            "conversation_id": conversation_id.value,
            "user_id": user_id.value,
            "is_typing": is_typing,
            "timestamp": _now(),
        },
    )


def read_receipt_event(
    conversation_id: ConversationId, user_id: UserId, up_to_sequence: int
) -> dict[str, Any]:
    return envelope(
        MESSAGE_READ,
        {
            "conversation_id": conversation_id.value,
            "user_id": user_id.value,
            "up_to_sequence": up_to_sequence,
            "read_at": _now(),
        },
    )


def heartbeat_ack_event() -> dict[str, Any]:
    return envelope(HEARTBEAT_ACK, {"timestamp": _now()})


def error_event(message: str, code: Optional[str] = None) -> dict[str, Any]:
    data = {"message": message}
    if code:
        data["code"] = code
    return envelope(ERROR, data)
