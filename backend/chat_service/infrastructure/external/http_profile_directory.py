"""
HTTP client for the external identity service.

    POST {base_url}/api/batch/profiles
    Authorization: Bearer <service token>
    {"user_uuids": [...], "business_uuids": [...]}
    → {"users": [{"uuid", "name", "avatar_url"}], "businesses": [...]}

Every failure (network, HTTP status, malformed body, missing configuration) is
raised as ExternalDependencyError.
"""

import logging
from typing import Any, Optional

import httpx

from chat_service.domain.entities.profile import Profile, ProfileKey
from chat_service.domain.exceptions import ExternalDependencyError
from chat_service.domain.ports.profile_directory import ProfileDirectory
from chat_service.domain.value_objects import ProfileKind

logger = logging.getLogger(__name__)

BATCH_PATH = "/api/batch/profiles"


class HttpProfileDirectory(ProfileDirectory):
    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._transport = transport

    async def batch_fetch(
        self, user_uuids: list[str], business_uuids: list[str]
    ) -> dict[ProfileKey, Profile]:
        if not self._base_url:
            raise ExternalDependencyError("Identity service URL is not configured")
        if not user_uuids and not business_uuids:
            return {}

        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        payload = {"user_uuids": user_uuids, "business_uuids": business_uuids}

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self._base_url}{BATCH_PATH}", headers=headers, json=payload
                )
        except httpx.HTTPError as exc:
            msg = f"Identity service unreachable: {exc}"
            logger.warning(f"[Identity] {msg}")
            raise ExternalDependencyError(msg) from exc

        if response.status_code >= 400:
            msg = f"Identity service returned {response.status_code}"
            logger.warning(f"[Identity] {msg}: {response.text[:200]}")
            raise ExternalDependencyError(msg)

        try:
            body = response.json()
            profiles = {}
            for item in body.get("users") or []:
                profile = _to_profile(item, ProfileKind.USER)
                profiles[ProfileKey(ProfileKind.USER, profile.uuid)] = profile
            for item in body.get("businesses") or []:
                profile = _to_profile(item, ProfileKind.BUSINESS)
                profiles[ProfileKey(ProfileKind.BUSINESS, profile.uuid)] = profile
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ExternalDependencyError(f"Malformed identity response: {exc}") from exc

        logger.debug(
            f"[Identity] Resolved {len(profiles)} of "
            f"{len(user_uuids) + len(business_uuids)} profiles"
        )
        return profiles


def _to_profile(item: dict[str, Any], kind: ProfileKind) -> Profile:
    return Profile(
        uuid=str(item["uuid"]),
        kind=kind,
        name=item.get("name") or "",
        avatar_url=item.get("avatar_url") or item.get("avatarUrl"),
    )
