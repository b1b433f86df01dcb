"""
Realtime Channel Port - one connected client's push channel.
Implementation: infrastructure/realtime/websocket_channel.py
"""

from abc import ABC, abstractmethod
from typing import Any


class RealtimeChannel(ABC):
    @property
    @abstractmethod
    def channel_id(self) -> str: ...

    @abstractmethod
    async def send(self, event: dict[str, Any]) -> None:
        """Push one event. Raises if the channel is broken."""
        ...

    @abstractmethod
    async def close(self) -> None: ...
