"""
INFRASTRUCTURE LAYER - adapters for the domain ports.

- persistence/ → in-memory and Prisma repositories
- cache/       → Redis client factory and profile cache stores
- external/    → identity service HTTP client
- realtime/    → WebSocket channel
"""
