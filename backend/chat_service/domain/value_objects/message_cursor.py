"""
MessageCursor Value Object - opaque position in a conversation's history.

Wraps the sequence number of the oldest message already returned; the next page
starts strictly before it. Serialized as a plain decimal string so clients can
pass it back untouched.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MessageCursor:
    before_sequence: int

    def __post_init__(self):
        if self.before_sequence < 1:
            raise ValueError("Cursor sequence must be positive")

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["MessageCursor"]:
        if raw is None or raw == "":
            return None
        try:
            return cls(int(raw))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid cursor: {raw}") from e

    def __str__(self) -> str:
        return str(self.before_sequence)
