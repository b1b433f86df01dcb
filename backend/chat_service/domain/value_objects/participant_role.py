from enum import Enum


class ParticipantRole(str, Enum):
    """Role of a participant inside one conversation."""

    ADMIN = "admin"  # group creator
    MEMBER = "member"
    CUSTOMER = "customer"  # user side of a business conversation
    BUSINESS = "business"  # business placeholder participant
