"""
BusinessId Value Object - identity of a business in the external identity service.
"""

from dataclasses import dataclass
from uuid import UUID

from chat_service.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class BusinessId:
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("BusinessId cannot be empty")
        UUID(self.value)

    def as_participant(self) -> UserId:
        """The placeholder participant that stands in for the business."""
        return UserId(self.value)

    def __str__(self) -> str:
        return self.value
