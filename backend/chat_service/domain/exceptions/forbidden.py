"""
ForbiddenError - Raised when the caller is not allowed to perform an action.
Maps to: HTTP 403 Forbidden
"""

from chat_service.domain.exceptions.base import DomainError


class ForbiddenError(DomainError):
    """Raised when user lacks permission (e.g. sender is not a participant)"""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)
