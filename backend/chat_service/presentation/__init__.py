"""
PRESENTATION LAYER - HTTP and WebSocket surface.

- api/          → FastAPI routers (thin: request → command/query → DTO)
- dependencies/ → auth dependency (JWT → AuthUser)
"""
