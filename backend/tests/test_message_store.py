import asyncio

import pytest

from chat_service.domain.entities.message import MessageDraft
from chat_service.domain.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from chat_service.domain.value_objects import MessageCursor, MessageId, MessageType
from chat_service.infrastructure.persistence import InMemoryMessageRepository
from conftest import build_engine, new_user_id


class FlakyMessageRepository(InMemoryMessageRepository):
    """Fails the first `failures` appends with a sequence conflict."""

    failures = 2

    def __init__(self, db):
        super().__init__(db)
        self.attempts = 0

    async def append(self, draft: MessageDraft):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise ConflictError("sequence taken")
        return await super().append(draft)


async def _group(engine):
    members = [new_user_id() for _ in range(3)]
    group = await engine.manager.create_group(members[0], members[1:], "team")
    return group, members


@pytest.mark.asyncio
async def test_sequences_are_gap_free_under_concurrent_appends(engine):
    group, members = await _group(engine)

    messages = await asyncio.gather(
        *(
            engine.store.append(group.id, members[i % 3], f"message {i}")
            for i in range(60)
        )
    )

    assert sorted(m.sequence for m in messages) == list(range(1, 61))
    assert len({m.id for m in messages}) == 60


@pytest.mark.asyncio
async def test_sequences_are_per_conversation(engine):
    a, b, c = new_user_id(), new_user_id(), new_user_id()
    first = await engine.manager.create_direct(a, b)
    second = await engine.manager.create_direct(a, c)

    await engine.store.append(first.id, a, "one")
    await engine.store.append(first.id, b, "two")
    other = await engine.store.append(second.id, a, "hello")

    assert other.sequence == 1


@pytest.mark.asyncio
async def test_non_participant_cannot_append(engine):
    group, _ = await _group(engine)

    with pytest.raises(ForbiddenError):
        await engine.store.append(group.id, new_user_id(), "let me in")
    assert await engine.store.latest_sequence(group.id) == 0


@pytest.mark.asyncio
async def test_blank_and_oversized_content_is_rejected():
    engine = build_engine(max_length=10)
    group, members = await _group(engine)

    with pytest.raises(ValidationError):
        await engine.store.append(group.id, members[0], " \n\t ")
    with pytest.raises(ValidationError):
        await engine.store.append(group.id, members[0], "x" * 11)
    assert await engine.store.latest_sequence(group.id) == 0


@pytest.mark.asyncio
async def test_content_is_sanitized(engine):
    group, members = await _group(engine)

    message = await engine.store.append(
        group.id, members[0], "  hi\x00 there\n\n\n\nbye<script>alert(1)</script> "
    )

    assert message.content == "hi there\n\nbye"
    assert message.type is MessageType.TEXT


@pytest.mark.asyncio
async def test_append_bumps_last_activity(engine):
    group, members = await _group(engine)
    before = (await engine.conversations.get_by_id(group.id)).last_activity

    message = await engine.store.append(group.id, members[1], "hello")

    after = (await engine.conversations.get_by_id(group.id)).last_activity
    assert after == message.created_at
    assert after >= before


@pytest.mark.asyncio
async def test_pagination_walks_history_without_gaps_or_duplicates(engine):
    group, members = await _group(engine)
    for i in range(120):
        await engine.store.append(group.id, members[i % 3], f"m{i}")

    seen = []
    cursor = None
    pages = 0
    while True:
        page = await engine.store.page(group.id, cursor)
        pages += 1
        sequences = [m.sequence for m in page.messages]
        assert sequences == sorted(sequences, reverse=True)
        seen.extend(sequences)
        if page.next_cursor is None:
            break
        cursor = MessageCursor.parse(str(page.next_cursor))

    assert pages == 3
    assert sorted(seen) == list(range(1, 121))
    assert len(seen) == len(set(seen))


@pytest.mark.asyncio
async def test_page_limit_is_capped_and_validated(engine):
    group, members = await _group(engine)
    for i in range(150):
        await engine.store.append(group.id, members[0], f"m{i}")

    page = await engine.store.page(group.id, limit=1000)
    assert len(page.messages) == 100
    assert page.messages[0].sequence == 150

    with pytest.raises(ValidationError):
        await engine.store.page(group.id, limit=0)


@pytest.mark.asyncio
async def test_empty_conversation_has_no_next_cursor(engine):
    group, _ = await _group(engine)

    page = await engine.store.page(group.id)

    assert page.messages == []
    assert page.next_cursor is None


@pytest.mark.asyncio
async def test_exact_page_boundary_ends_on_first_sequence(engine):
    group, members = await _group(engine)
    for i in range(5):
        await engine.store.append(group.id, members[0], f"m{i}")

    first = await engine.store.page(group.id, limit=5)

    assert first.next_cursor is None


@pytest.mark.asyncio
async def test_iter_history_yields_newest_to_oldest(engine):
    group, members = await _group(engine)
    for i in range(7):
        await engine.store.append(group.id, members[0], f"m{i}")

    sequences = [m.sequence async for m in engine.store.iter_history(group.id, batch_size=3)]

    assert sequences == [7, 6, 5, 4, 3, 2, 1]


@pytest.mark.asyncio
async def test_append_retries_sequence_conflicts():
    engine = build_engine(message_repository_cls=FlakyMessageRepository, max_attempts=3)
    group, members = await _group(engine)

    message = await engine.store.append(group.id, members[0], "eventually")

    assert message.sequence == 1
    assert engine.messages.attempts == 3


@pytest.mark.asyncio
async def test_append_gives_up_after_max_attempts():
    engine = build_engine(message_repository_cls=FlakyMessageRepository, max_attempts=2)
    group, members = await _group(engine)

    with pytest.raises(ConflictError):
        await engine.store.append(group.id, members[0], "never")
    assert engine.messages.attempts == 2


@pytest.mark.asyncio
async def test_get_missing_message(engine):
    with pytest.raises(NotFoundError):
        await engine.store.get(MessageId.generate())
