"""RealtimeChannel backed by a Starlette/FastAPI WebSocket."""

import uuid
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from chat_service.domain.ports.realtime_channel import RealtimeChannel


class WebSocketChannel(RealtimeChannel):
    def __init__(self, websocket: WebSocket):
        self._websocket = websocket
        self._channel_id = uuid.uuid4().hex

    @property
    def channel_id(self) -> str:
        return self._channel_id

    async def send(self, event: dict[str, Any]) -> None:
        if self._websocket.application_state is not WebSocketState.CONNECTED:
            raise ConnectionError(f"WebSocket {self._channel_id} is closed")
        await self._websocket.send_json(event)

    async def close(self) -> None:
        if self._websocket.application_state is WebSocketState.CONNECTED:
            await self._websocket.close()
