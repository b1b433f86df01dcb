"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- services/  → The engine components (ProfileCache, ParticipantRegistry,
               MessageStore, ConversationManager, NotificationDispatcher, UserService)
- commands/  → Write operations (CQRS)
- queries/   → Read operations (CQRS)
- dto/       → Data Transfer Objects and realtime event payloads
- common/    → Shared interfaces (Command, Query base classes)

Rules:
- Depends on Domain layer only
- No HTTP/framework code here
"""
