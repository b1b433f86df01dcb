"""
PORTS - Interfaces that infrastructure implements

A "port" is an abstract interface that defines WHAT the engine needs,
without specifying HOW it's done.

Subfolders:
- repositories/            → Durable state (conversations, participants, messages, users)
- profile_directory.py     → External identity service (batch profile lookup)
- profile_cache_store.py   → Backing store for the profile cache (memory / Redis)
- realtime_channel.py      → One connected client's push channel
"""

from chat_service.domain.ports.profile_directory import ProfileDirectory
from chat_service.domain.ports.profile_cache_store import ProfileCacheStore
from chat_service.domain.ports.realtime_channel import RealtimeChannel

__all__ = [
    "ProfileDirectory",
    "ProfileCacheStore",
    "RealtimeChannel",
]
