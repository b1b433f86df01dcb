from enum import Enum


class ProfileKind(str, Enum):
    USER = "user"
    BUSINESS = "business"
