import asyncio
import os
import time
import uuid
from dataclasses import dataclass
from typing import Any, Optional

import jwt
import pytest

os.environ.setdefault("SERVICE_AUTH_SECRET", "test-secret")
os.environ["APP_ENV"] = "testing"

from fastapi.testclient import TestClient

from chat_service.application.services import (
    ConversationManager,
    MessageStore,
    NotificationDispatcher,
    ParticipantRegistry,
    ProfileCache,
    UserService,
)
from chat_service.domain.entities.profile import Profile, ProfileKey
from chat_service.domain.exceptions import ExternalDependencyError
from chat_service.domain.ports import ProfileDirectory, RealtimeChannel
from chat_service.domain.value_objects import ProfileKind, UserId
from chat_service.fastapi_app import create_fastapi_app
from chat_service.infrastructure.cache import InMemoryProfileCacheStore
from chat_service.infrastructure.persistence import (
    InMemoryConversationRepository,
    InMemoryDatabase,
    InMemoryMessageRepository,
    InMemoryParticipantRepository,
    InMemoryUserRepository,
)

SERVICE_AUTH_SECRET = os.environ["SERVICE_AUTH_SECRET"]


def _service_token(user_id=None, kaha_id="kaha-test", expires_in=300):
    now = int(time.time())
    return jwt.encode(
        {
            "id": user_id or str(uuid.uuid4()),
            "kahaId": kaha_id,
            "iat": now,
            "exp": now + expires_in,
        },
        SERVICE_AUTH_SECRET,
        algorithm="HS256",
    )


def new_user_id() -> UserId:
    return UserId(str(uuid.uuid4()))


# ==================== STUB COLLABORATORS ====================


class FakeChannel(RealtimeChannel):
    """Records pushed events; raises on send when broken."""

    def __init__(self, broken: bool = False):
        self._id = uuid.uuid4().hex
        self.broken = broken
        self.events: list[dict[str, Any]] = []
        self.closed = False

    @property
    def channel_id(self) -> str:
        return self._id

    async def send(self, event: dict[str, Any]) -> None:
        if self.broken:
            raise ConnectionError("peer went away")
        self.events.append(event)

    async def close(self) -> None:
        self.closed = True

    def names(self) -> list[str]:
        return [e["event"] for e in self.events]


class StubDirectory(ProfileDirectory):
    """Identity service stand-in that counts calls."""

    def __init__(self):
        self.names: dict[str, str] = {}
        self.calls: list[tuple[list[str], list[str]]] = []
        self.fail = False
        self.delay = 0.0
        self.gate: Optional[asyncio.Event] = None

    async def batch_fetch(self, user_uuids, business_uuids):
        self.calls.append((list(user_uuids), list(business_uuids)))
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ExternalDependencyError("identity service down")
        result = {}
        for kind_uuids, kind in ((user_uuids, "user"), (business_uuids, "business")):
            for u in kind_uuids:
                if u in self.names:
                    key = ProfileKey(ProfileKind(kind), u)
                    result[key] = Profile(uuid=u, kind=key.kind, name=self.names[u])
        return result


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class Engine:
    db: InMemoryDatabase
    conversations: InMemoryConversationRepository
    participants: InMemoryParticipantRepository
    messages: InMemoryMessageRepository
    users: InMemoryUserRepository
    registry: ParticipantRegistry
    store: MessageStore
    manager: ConversationManager
    dispatcher: NotificationDispatcher
    user_service: UserService
    clock: FakeClock


def build_engine(
    message_repository_cls=InMemoryMessageRepository,
    conversation_repository_cls=InMemoryConversationRepository,
    **store_options,
) -> Engine:
    db = InMemoryDatabase()
    conversations = conversation_repository_cls(db)
    participants = InMemoryParticipantRepository(db)
    messages = message_repository_cls(db)
    users = InMemoryUserRepository(db)
    registry = ParticipantRegistry(participants, messages)
    store_options.setdefault("retry_delay", 0)
    store = MessageStore(messages, conversations, registry, **store_options)
    manager = ConversationManager(conversations, registry, store)
    clock = FakeClock()
    dispatcher = NotificationDispatcher(registry, typing_timeout=5, clock=clock)
    return Engine(
        db=db,
        conversations=conversations,
        participants=participants,
        messages=messages,
        users=users,
        registry=registry,
        store=store,
        manager=manager,
        dispatcher=dispatcher,
        user_service=UserService(users),
        clock=clock,
    )


# ==================== FIXTURES ====================


@pytest.fixture()
def engine() -> Engine:
    return build_engine()


@pytest.fixture()
def directory() -> StubDirectory:
    return StubDirectory()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def profile_cache(directory, clock) -> ProfileCache:
    return ProfileCache(
        directory,
        InMemoryProfileCacheStore(),
        ttl_seconds=86400,
        fetch_timeout=0.5,
        clock=clock,
    )


@pytest.fixture()
def app():
    """Create and configure a new FastAPI app instance for each test."""
    return create_fastapi_app()


@pytest.fixture()
def client(app):
    """A test client sharing one event loop between HTTP calls and WebSockets."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user():
    """Returns (user_id, auth headers, token) for a fresh user."""

    def _make(kaha_id: Optional[str] = None):
        user_id = str(uuid.uuid4())
        token = _service_token(user_id, kaha_id or f"kaha-{user_id[:8]}")
        return user_id, {"Authorization": f"Bearer {token}"}, token

    return _make
