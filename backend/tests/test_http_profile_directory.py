import json

import httpx
import pytest

from chat_service.domain.entities.profile import ProfileKey
from chat_service.domain.exceptions import ExternalDependencyError
from chat_service.domain.value_objects import ProfileKind
from chat_service.infrastructure.external import HttpProfileDirectory

BASE_URL = "http://identity.test"


def _directory(handler, token="svc-token"):
    return HttpProfileDirectory(
        BASE_URL, token=token, timeout=1.0, transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_batch_fetch_posts_both_kinds_in_one_request():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "users": [{"uuid": "u1", "name": "Asha", "avatar_url": "https://img/u1"}],
                "businesses": [{"uuid": "b1", "name": "Momo House", "avatarUrl": "https://img/b1"}],
            },
        )

    profiles = await _directory(handler).batch_fetch(["u1", "u2"], ["b1"])

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == f"{BASE_URL}/api/batch/profiles"
    assert request.headers["Authorization"] == "Bearer svc-token"
    assert json.loads(request.content) == {"user_uuids": ["u1", "u2"], "business_uuids": ["b1"]}

    user = profiles[ProfileKey(ProfileKind.USER, "u1")]
    business = profiles[ProfileKey(ProfileKind.BUSINESS, "b1")]
    assert user.name == "Asha" and user.avatar_url == "https://img/u1"
    assert business.avatar_url == "https://img/b1"
    assert ProfileKey(ProfileKind.USER, "u2") not in profiles


@pytest.mark.asyncio
async def test_error_status_is_an_external_dependency_error():
    directory = _directory(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(ExternalDependencyError):
        await directory.batch_fetch(["u1"], [])


@pytest.mark.asyncio
async def test_network_error_is_an_external_dependency_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ExternalDependencyError):
        await _directory(handler).batch_fetch(["u1"], [])


@pytest.mark.asyncio
async def test_malformed_body_is_an_external_dependency_error():
    directory = _directory(lambda request: httpx.Response(200, json={"users": [{"name": "x"}]}))

    with pytest.raises(ExternalDependencyError):
        await directory.batch_fetch(["u1"], [])


@pytest.mark.asyncio
async def test_missing_base_url_fails_without_a_request():
    directory = HttpProfileDirectory("")

    with pytest.raises(ExternalDependencyError):
        await directory.batch_fetch(["u1"], [])


@pytest.mark.asyncio
async def test_token_header_is_optional():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"users": [], "businesses": []})

    assert await _directory(handler, token="").batch_fetch(["u1"], []) == {}
    assert "Authorization" not in seen[0].headers
