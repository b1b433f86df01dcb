import pytest

from chat_service.application.services.notification_dispatcher import ClientState
from chat_service.domain.exceptions import NotFoundError
from conftest import FakeChannel, new_user_id


async def _group_online(engine, size=3):
    members = [new_user_id() for _ in range(size)]
    group = await engine.manager.create_group(members[0], members[1:], "crew")
    channels = []
    for member in members:
        channel = FakeChannel()
        engine.dispatcher.connect(member, channel)
        channels.append(channel)
    return group, members, channels


@pytest.mark.asyncio
async def test_new_message_reaches_every_connected_participant(engine):
    group, members, channels = await _group_online(engine)
    second_tab = FakeChannel()
    engine.dispatcher.connect(members[0], second_tab)

    message = await engine.store.append(group.id, members[0], "hello all")
    delivered = await engine.dispatcher.publish_message(message)

    assert delivered == 4
    for channel in channels + [second_tab]:
        assert channel.names() == ["message.created"]
        assert channel.events[0]["data"]["sequence"] == 1
        assert channel.events[0]["data"]["content"] == "hello all"


@pytest.mark.asyncio
async def test_outsiders_receive_nothing(engine):
    group, members, _ = await _group_online(engine)
    stranger = FakeChannel()
    engine.dispatcher.connect(new_user_id(), stranger)

    message = await engine.store.append(group.id, members[1], "members only")
    await engine.dispatcher.publish_message(message)

    assert stranger.events == []


@pytest.mark.asyncio
async def test_broken_channel_is_dropped_without_blocking_others(engine):
    group, members, channels = await _group_online(engine)
    broken = FakeChannel(broken=True)
    engine.dispatcher.connect(members[2], broken)

    message = await engine.store.append(group.id, members[0], "still works")
    delivered = await engine.dispatcher.publish_message(message)

    assert delivered == 3
    assert all(c.names() == ["message.created"] for c in channels)
    assert not engine.registry.is_connected(members[2], broken)
    assert engine.registry.is_connected(members[2], channels[2])
    assert engine.dispatcher.state_of(broken) is ClientState.DISCONNECTED


@pytest.mark.asyncio
async def test_disconnected_channel_stops_receiving(engine):
    group, members, channels = await _group_online(engine)

    engine.dispatcher.disconnect(channels[1])
    message = await engine.store.append(group.id, members[0], "bye")
    await engine.dispatcher.publish_message(message)

    assert channels[1].events == []
    assert engine.dispatcher.state_of(channels[1]) is ClientState.DISCONNECTED
    assert not engine.registry.is_connected(members[1])


@pytest.mark.asyncio
async def test_typing_goes_to_others_only(engine):
    group, members, channels = await _group_online(engine)

    delivered = await engine.dispatcher.publish_typing(group.id, members[1], True)

    assert delivered == 2
    assert channels[1].events == []
    event = channels[0].events[0]
    assert event["event"] == "typing.update"
    assert event["data"]["user_id"] == members[1].value
    assert event["data"]["is_typing"] is True


@pytest.mark.asyncio
async def test_typing_from_outsider_is_rejected(engine):
    group, _, channels = await _group_online(engine)

    with pytest.raises(NotFoundError):
        await engine.dispatcher.publish_typing(group.id, new_user_id(), True)
    assert all(c.events == [] for c in channels)


@pytest.mark.asyncio
async def test_typing_state_expires_to_idle(engine):
    group, members, channels = await _group_online(engine)
    assert engine.dispatcher.state_of(channels[0]) is ClientState.CONNECTED

    await engine.dispatcher.publish_typing(group.id, members[0], True)
    assert engine.dispatcher.state_of(channels[0]) is ClientState.TYPING

    engine.clock.advance(4.9)
    assert engine.dispatcher.state_of(channels[0]) is ClientState.TYPING
    engine.clock.advance(0.2)
    assert engine.dispatcher.state_of(channels[0]) is ClientState.IDLE


@pytest.mark.asyncio
async def test_typing_stop_goes_idle_immediately(engine):
    group, members, channels = await _group_online(engine)
    await engine.dispatcher.publish_typing(group.id, members[0], True)

    await engine.dispatcher.publish_typing(group.id, members[0], False)

    assert engine.dispatcher.state_of(channels[0]) is ClientState.IDLE
    assert [e["data"]["is_typing"] for e in channels[1].events] == [True, False]


@pytest.mark.asyncio
async def test_read_receipt_fans_out_only_when_pointer_moves(engine):
    group, members, channels = await _group_online(engine)
    for i in range(3):
        await engine.store.append(group.id, members[0], f"m{i}")

    assert await engine.dispatcher.publish_read_receipt(group.id, members[1], 3) is True
    assert await engine.dispatcher.publish_read_receipt(group.id, members[1], 2) is False

    assert channels[0].names() == ["message.read"]
    assert channels[0].events[0]["data"]["up_to_sequence"] == 3
    assert channels[1].events == []


@pytest.mark.asyncio
async def test_publish_with_nobody_online(engine):
    a, b = new_user_id(), new_user_id()
    conversation = await engine.manager.create_direct(a, b)

    message = await engine.store.append(conversation.id, a, "anyone?")

    assert await engine.dispatcher.publish_message(message) == 0
