"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain and application logic and caught by the
presentation layer, which maps them to HTTP status codes.
"""

from chat_service.domain.exceptions.base import DomainError
from chat_service.domain.exceptions.validation_error import ValidationError
from chat_service.domain.exceptions.forbidden import ForbiddenError
from chat_service.domain.exceptions.not_found import NotFoundError
from chat_service.domain.exceptions.conflict import ConflictError
from chat_service.domain.exceptions.external_dependency import ExternalDependencyError

__all__ = [
    "DomainError",
    "ValidationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ExternalDependencyError",
]
