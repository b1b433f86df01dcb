"""
DomainError - Common base for every error raised by the engine.
"""


class DomainError(Exception):
    """Base class for domain errors. Carries a human readable message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
