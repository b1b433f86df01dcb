"""
NotFoundError - Raised when a requested entity does not exist, or when the
caller is not a participant of the conversation that owns it.
Maps to: HTTP 404 Not Found
"""

from chat_service.domain.exceptions.base import DomainError


class NotFoundError(DomainError):
    """Exception raised when a requested entity is not found."""

    def __init__(self, message: str = "The requested entity was not found."):
        super().__init__(message)
