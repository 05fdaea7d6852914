import logging
from dataclasses import dataclass, field

from app.core.config import Settings
from app.utils.redis_pool import create_redis

from .favoriting import FavoritingEngine
from .friending import FriendingEngine
from .remixing import RemixingEngine
from .retirement import RetirementHub
from .store import MemoryRelationStore, RedisRelationStore, RelationStore
from .types import ContentCatalog

log = logging.getLogger(__name__)


@dataclass
class Engagement:
    store: RelationStore
    friending: FriendingEngine
    favoriting: FavoritingEngine
    remixing: RemixingEngine
    retirement: RetirementHub = field(default_factory=RetirementHub)

    async def close(self) -> None:
        await self.store.close()


def build_store(settings: Settings) -> RelationStore:
    if settings.RELATION_STORE == "redis":
        log.info("Using Redis relation store (prefix=%s)", settings.REDIS_KEY_PREFIX)
        return RedisRelationStore(
            create_redis(
                settings.REDIS_URL,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            ),
            prefix=settings.REDIS_KEY_PREFIX,
            lock_timeout=settings.LOCK_TIMEOUT,
            lock_wait_timeout=settings.LOCK_WAIT_TIMEOUT,
            lock_retry_delay=settings.LOCK_RETRY_DELAY,
            owns_client=True,
        )
    log.info("Using in-memory relation store")
    return MemoryRelationStore()


def build_engagement(
    store: RelationStore,
    catalog: ContentCatalog | None = None,
    retirement: RetirementHub | None = None,
) -> Engagement:
    """Wire the engines around one store and subscribe them to retirement."""
    retirement = retirement or RetirementHub()
    engagement = Engagement(
        store=store,
        friending=FriendingEngine(store),
        favoriting=FavoritingEngine(store),
        remixing=RemixingEngine(store, catalog),
        retirement=retirement,
    )
    retirement.on_content(engagement.favoriting.retire_content)
    retirement.on_content(engagement.remixing.retire_content)
    retirement.on_identity(engagement.friending.retire_identity)
    retirement.on_identity(engagement.favoriting.retire_identity)
    return engagement
