from dataclasses import dataclass
from typing import Sequence

import fakeredis
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.engagement import build_engagement
from app.engagement.refs import ContentRef, UserRef
from app.engagement.store import MemoryRelationStore, RedisRelationStore
from app.main import create_app


@dataclass
class FakePost:
    ref: ContentRef
    author: UserRef
    original_artist: UserRef | None = None


class FakeCatalog:
    """In-memory content catalog keyed by content reference."""

    def __init__(self):
        self.posts: dict[ContentRef, FakePost] = {}

    def add(self, post_id: str, author: str, original_artist: str | None = None) -> ContentRef:
        ref = ContentRef(post_id)
        self.posts[ref] = FakePost(
            ref,
            UserRef(author),
            UserRef(original_artist) if original_artist else None,
        )
        return ref

    async def get_by_ids(self, refs: Sequence[ContentRef]) -> list[FakePost]:
        return [self.posts[r] for r in refs if r in self.posts]


@pytest.fixture
def redis_client():
    return fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture(params=["memory", "redis"])
def store(request):
    """Every engine test runs once per relation store backend."""
    if request.param == "memory":
        return MemoryRelationStore()
    client = request.getfixturevalue("redis_client")
    return RedisRelationStore(client, prefix="test")


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def engagement(store, catalog):
    return build_engagement(store, catalog=catalog)


@pytest.fixture
def alice():
    return UserRef("alice")


@pytest.fixture
def bob():
    return UserRef("bob")


@pytest.fixture
def carol():
    return UserRef("carol")


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DB_URL="sqlite+aiosqlite://",
        SECRET_KEY="test-secret",
        RELATION_STORE="memory",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c
