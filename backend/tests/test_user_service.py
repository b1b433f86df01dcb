import pytest

from chat_service.domain.exceptions import ConflictError
from conftest import new_user_id


@pytest.mark.asyncio
async def test_first_contact_creates_user(engine):
    user_id = new_user_id()

    user = await engine.user_service.ensure_user(user_id, "kaha-1")

    stored = await engine.users.get_by_id(user_id)
    assert stored.kaha_id == "kaha-1"
    assert user.id == user_id


@pytest.mark.asyncio
async def test_known_user_is_left_alone(engine):
    user_id = new_user_id()
    first = await engine.user_service.ensure_user(user_id, "kaha-1")

    again = await engine.user_service.ensure_user(user_id, "kaha-1")

    assert again.updated_at == first.updated_at


@pytest.mark.asyncio
async def test_reissued_kaha_id_is_restamped(engine):
    user_id = new_user_id()
    await engine.user_service.ensure_user(user_id, "kaha-old")

    await engine.user_service.ensure_user(user_id, "kaha-new")

    assert (await engine.users.get_by_id(user_id)).kaha_id == "kaha-new"
    assert await engine.users.get_by_kaha_id("kaha-old") is None
    assert (await engine.users.get_by_kaha_id("kaha-new")).id == user_id


@pytest.mark.asyncio
async def test_kaha_id_cannot_be_shared(engine):
    await engine.user_service.ensure_user(new_user_id(), "kaha-taken")

    with pytest.raises(ConflictError):
        await engine.user_service.ensure_user(new_user_id(), "kaha-taken")
