import asyncio

import pytest

from chat_service.application.services import ConversationManager
from chat_service.domain.entities.message import MessageDraft
from chat_service.domain.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from chat_service.domain.value_objects import (
    BusinessId,
    ConversationId,
    ConversationType,
    ParticipantRole,
)
from chat_service.infrastructure.persistence import (
    InMemoryConversationRepository,
    InMemoryMessageRepository,
)
from conftest import build_engine, new_user_id


class RacingConversationRepository(InMemoryConversationRepository):
    """Hides the first pair lookup, as if another creator committed in between."""

    def __init__(self, db):
        super().__init__(db)
        self.hidden_lookups = 1

    async def get_direct(self, direct_key):
        if self.hidden_lookups:
            self.hidden_lookups -= 1
            return None
        return await super().get_direct(direct_key)


class RejectingMessageRepository(InMemoryMessageRepository):
    async def append(self, draft: MessageDraft):
        raise ConflictError("sequence taken")


# ==================== DIRECT ====================


@pytest.mark.asyncio
async def test_direct_conversation_is_idempotent_for_either_order(engine):
    a, b = new_user_id(), new_user_id()

    first = await engine.manager.create_direct(a, b)
    again = await engine.manager.create_direct(a, b)
    reversed_pair = await engine.manager.create_direct(b, a)

    assert first.type is ConversationType.DIRECT
    assert again.id == first.id
    assert reversed_pair.id == first.id
    participants = await engine.registry.participants_of(first.id)
    assert {p.user_id for p in participants} == {a, b}


@pytest.mark.asyncio
async def test_direct_conversation_with_self_is_rejected(engine):
    a = new_user_id()
    with pytest.raises(ValidationError):
        await engine.manager.create_direct(a, a)
    assert engine.db.conversations == {}


@pytest.mark.asyncio
async def test_concurrent_direct_creation_converges(engine):
    a, b = new_user_id(), new_user_id()

    results = await asyncio.gather(
        *(engine.manager.create_direct(a, b) for _ in range(5)),
        *(engine.manager.create_direct(b, a) for _ in range(5)),
    )

    assert len({c.id for c in results}) == 1
    assert len(engine.db.conversations) == 1


@pytest.mark.asyncio
async def test_losing_direct_insert_returns_the_winner():
    engine = build_engine(conversation_repository_cls=RacingConversationRepository)
    a, b = new_user_id(), new_user_id()

    winner = await engine.manager.create_direct(a, b)
    engine.conversations.hidden_lookups = 1
    loser = await engine.manager.create_direct(b, a)

    assert loser.id == winner.id
    assert len(engine.db.conversations) == 1


# ==================== GROUP ====================


@pytest.mark.asyncio
async def test_group_requires_three_distinct_participants(engine):
    creator, other = new_user_id(), new_user_id()

    with pytest.raises(ValidationError, match="at least 3"):
        await engine.manager.create_group(creator, [other], "Trip")
    # Duplicates and the creator themself don't count twice
    with pytest.raises(ValidationError):
        await engine.manager.create_group(creator, [other, other, creator], "Trip")
    assert engine.db.conversations == {}


@pytest.mark.asyncio
async def test_group_creator_is_admin(engine):
    creator, b, c = new_user_id(), new_user_id(), new_user_id()

    group = await engine.manager.create_group(creator, [b, c, b], "  Weekend plans  ")

    assert group.type is ConversationType.GROUP
    assert group.name == "Weekend plans"
    participants = await engine.registry.participants_of(group.id)
    roles = {p.user_id: p.role for p in participants}
    assert roles == {
        creator: ParticipantRole.ADMIN,
        b: ParticipantRole.MEMBER,
        c: ParticipantRole.MEMBER,
    }


@pytest.mark.asyncio
async def test_add_participants_grows_group_for_admins_only(engine):
    creator, b, c, d = (new_user_id() for _ in range(4))
    group = await engine.manager.create_group(creator, [b, c])
    await engine.store.append(group.id, b, "before d joined")

    with pytest.raises(ForbiddenError):
        await engine.manager.add_participants(group.id, b, [d])

    added = await engine.manager.add_participants(group.id, creator, [d, b])

    assert [p.user_id for p in added] == [d]
    assert len(await engine.registry.participants_of(group.id)) == 4
    # History from before joining is not unread for the newcomer
    assert await engine.registry.unread_count(group.id, d) == 0
    assert await engine.registry.recompute_unread(group.id, d) == 0


@pytest.mark.asyncio
async def test_add_participants_rejected_for_direct(engine):
    a, b = new_user_id(), new_user_id()
    direct = await engine.manager.create_direct(a, b)

    with pytest.raises(ValidationError):
        await engine.manager.add_participants(direct.id, a, [new_user_id()])


# ==================== BUSINESS ====================


@pytest.mark.asyncio
async def test_business_conversation_with_initial_message(engine):
    customer = new_user_id()
    business = BusinessId(new_user_id().value)

    result = await engine.manager.create_business(customer, business, "  Is this open?  ")

    conversation = result.conversation
    assert conversation.type is ConversationType.BUSINESS
    assert conversation.business_id == business
    participants = await engine.registry.participants_of(conversation.id)
    roles = {p.user_id: p.role for p in participants}
    assert roles == {
        customer: ParticipantRole.CUSTOMER,
        business.as_participant(): ParticipantRole.BUSINESS,
    }
    assert result.initial_message.sequence == 1
    assert result.initial_message.content == "Is this open?"
    assert await engine.registry.unread_count(conversation.id, business.as_participant()) == 1
    assert await engine.registry.unread_count(conversation.id, customer) == 0


@pytest.mark.asyncio
async def test_business_blank_initial_message_is_rejected_before_creation(engine):
    with pytest.raises(ValidationError):
        await engine.manager.create_business(
            new_user_id(), BusinessId(new_user_id().value), "   "
        )
    assert engine.db.conversations == {}


@pytest.mark.asyncio
async def test_business_initial_message_failure_keeps_conversation():
    engine = build_engine(
        message_repository_cls=RejectingMessageRepository, max_attempts=1
    )
    customer = new_user_id()

    result = await engine.manager.create_business(
        customer, BusinessId(new_user_id().value), "hello"
    )

    assert result.initial_message is None
    assert result.conversation.id in engine.db.conversations
    assert await engine.registry.is_participant(result.conversation.id, customer)


# ==================== READS ====================


@pytest.mark.asyncio
async def test_list_for_user_newest_activity_first_with_unread(engine):
    me, a, b = new_user_id(), new_user_id(), new_user_id()
    older = await engine.manager.create_direct(me, a)
    newer = await engine.manager.create_direct(me, b)
    await engine.store.append(older.id, a, "ping")
    await engine.registry.increment_unread(older.id, a)

    summaries = await engine.manager.list_for_user(me)

    assert [s.conversation.id for s in summaries] == [older.id, newer.id]
    assert summaries[0].unread_count == 1
    assert summaries[0].last_message.content == "ping"
    assert summaries[1].unread_count == 0
    assert summaries[1].last_message is None


@pytest.mark.asyncio
async def test_list_for_user_returns_every_conversation(engine):
    me = new_user_id()
    created = [await engine.manager.create_direct(me, new_user_id()) for _ in range(250)]

    summaries = await engine.manager.list_for_user(me)

    listed = {s.conversation.id for s in summaries}
    assert listed == {c.id for c in created}
    assert listed == set(await engine.registry.unread_counts_for(me))


@pytest.mark.asyncio
async def test_list_for_user_honours_an_explicit_cap(engine):
    me = new_user_id()
    for _ in range(3):
        await engine.manager.create_direct(me, new_user_id())
    capped = ConversationManager(
        engine.conversations, engine.registry, engine.store, user_limit=2
    )

    assert len(await capped.list_for_user(me)) == 2


@pytest.mark.asyncio
async def test_get_hides_conversations_from_non_participants(engine):
    a, b, outsider = new_user_id(), new_user_id(), new_user_id()
    direct = await engine.manager.create_direct(a, b)

    details = await engine.manager.get(direct.id, a)
    assert details.conversation.id == direct.id

    with pytest.raises(NotFoundError):
        await engine.manager.get(direct.id, outsider)
    with pytest.raises(NotFoundError):
        await engine.manager.get(ConversationId.generate(), a)
