"""
DOMAIN LAYER - Conversations, participants and messages

This layer contains:
- Entities: Business objects with identity (Conversation, Participant, Message, User)
- Value Objects: Immutable types (UserId, ConversationId, MessageId, Cursor)
- Ports: Interfaces that infrastructure implements (repositories, profile directory,
  profile cache store, realtime channel)
- Exceptions: Domain-specific errors

RULES:
1. NO framework imports (no FastAPI, Prisma, Pydantic, Redis, etc.)
2. NO I/O operations
3. Only depends on Python stdlib
"""
