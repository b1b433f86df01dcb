"""
ConflictError - Raised when a concurrent write lost a race (duplicate sequence
number, duplicate direct pair, kaha id already taken).
Maps to: HTTP 409 Conflict
"""

from chat_service.domain.exceptions.base import DomainError


class ConflictError(DomainError):
    """Raised when a write conflicts with concurrent state."""

    def __init__(self, message: str = "Conflicting concurrent update"):
        super().__init__(message)
