from chat_service.infrastructure.realtime.websocket_channel import WebSocketChannel

__all__ = ["WebSocketChannel"]
