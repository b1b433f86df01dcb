"""
Profile Directory Port - batch lookup against the external identity service.
Implementation: infrastructure/external/http_profile_directory.py
"""

from abc import ABC, abstractmethod

from chat_service.domain.entities.profile import Profile, ProfileKey


class ProfileDirectory(ABC):
    @abstractmethod
    async def batch_fetch(
        self, user_uuids: list[str], business_uuids: list[str]
    ) -> dict[ProfileKey, Profile]:
        """
        Fetch profiles in one call. uuids missing from the result were not found.

        Raises ExternalDependencyError on transport or service failure.
        """
        ...
