"""
ExternalDependencyError - Raised by adapters when an external service fails or
times out. Never surfaced to API callers; consumers degrade instead.
"""

from chat_service.domain.exceptions.base import DomainError


class ExternalDependencyError(DomainError):
    """Raised when the identity service (or another collaborator) is unavailable."""

    def __init__(self, message: str = "External dependency unavailable"):
        super().__init__(message)
