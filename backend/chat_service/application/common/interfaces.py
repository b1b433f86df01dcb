"""
Base interfaces for CQRS pattern.

Usage:
    @dataclass(frozen=True)
    class CreateGroupConversationCommand(Command[Conversation]):
        creator_id: UserId
        participant_ids: list[UserId]
        name: Optional[str]

    class CreateGroupConversationHandler(CommandHandler[Conversation]):
        def __init__(self, manager: ConversationManager):
            self._manager = manager

        async def execute(self, command) -> Conversation:
            return await self._manager.create_group(...)
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic

T = TypeVar("T")
class Command(ABC, Generic[T]):
    """Base class for write operations"""
    pass

class CommandHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, command: Command[T]) -> T:
        """Execute the command and return a result of type T"""
        ...

class Query(ABC, Generic[T]):
    """Base class for read operations"""
    pass

class QueryHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, query: Query[T]) -> T:
        """Execute the query and return a result of type T"""
        ...
