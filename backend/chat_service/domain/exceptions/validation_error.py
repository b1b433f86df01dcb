"""
ValidationError - Raised when input is malformed or insufficient.
Maps to: HTTP 400 Bad Request
"""

from chat_service.domain.exceptions.base import DomainError


class ValidationError(DomainError):
    """Exception raised for domain validation errors. Never retried."""

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message)
