import logging

import redis.asyncio as redis

from app.utils.concurrency import advisory_lock
from app.utils.redis_pool import close_redis

from .base import RelationStore

log = logging.getLogger(__name__)


# KEYS: forward index, reverse index, sequence counter
# ARGV: left, right
INSERT_SCRIPT = """
if redis.call("zscore", KEYS[1], ARGV[2]) then
    return 0
end
local seq = redis.call("incr", KEYS[3])
redis.call("zadd", KEYS[1], seq, ARGV[2])
redis.call("zadd", KEYS[2], seq, ARGV[1])
return 1
"""

# KEYS: forward index, reverse index
# ARGV: left, right
REMOVE_SCRIPT = """
if redis.call("zrem", KEYS[1], ARGV[2]) == 0 then
    return 0
end
redis.call("zrem", KEYS[2], ARGV[1])
return 1
"""

# KEYS: index being emptied
# ARGV: key prefix of the opposite index, member to drop from each opposite key
REMOVE_ALL_SCRIPT = """
local members = redis.call("zrange", KEYS[1], 0, -1)
for _, member in ipairs(members) do
    redis.call("zrem", ARGV[1] .. member, ARGV[2])
end
redis.call("del", KEYS[1])
return members
"""


class RedisRelationStore(RelationStore):
    """
    Shared store backed by sorted sets.

    Each relation keeps ``<prefix>:<relation>:r:<left>`` (the rights of a
    left) and ``<prefix>:<relation>:l:<right>`` (the lefts of a right),
    scored by a per-relation counter so reads come back in insertion order.
    Writes touching both indexes run as Lua scripts and are atomic.

    The client must be created with ``decode_responses=True``.
    """

    def __init__(
        self,
        client: redis.Redis,
        prefix: str = "engagement",
        lock_timeout: int = 10,
        lock_wait_timeout: float = 5.0,
        lock_retry_delay: float = 0.01,
        owns_client: bool = False,
    ):
        self.redis = client
        self.prefix = prefix
        self.lock_timeout = lock_timeout
        self.lock_wait_timeout = lock_wait_timeout
        self.lock_retry_delay = lock_retry_delay
        self._owns_client = owns_client
        self._insert = client.register_script(INSERT_SCRIPT)
        self._remove = client.register_script(REMOVE_SCRIPT)
        self._remove_all = client.register_script(REMOVE_ALL_SCRIPT)

    def _rights_key(self, relation: str, left: str = "") -> str:
        return f"{self.prefix}:{relation}:r:{left}"

    def _lefts_key(self, relation: str, right: str = "") -> str:
        return f"{self.prefix}:{relation}:l:{right}"

    def _seq_key(self, relation: str) -> str:
        return f"{self.prefix}:{relation}:seq"

    async def insert(self, relation: str, left: str, right: str) -> bool:
        added = await self._insert(
            keys=[
                self._rights_key(relation, left),
                self._lefts_key(relation, right),
                self._seq_key(relation),
            ],
            args=[left, right],
        )
        return added == 1

    async def remove(self, relation: str, left: str, right: str) -> bool:
        removed = await self._remove(
            keys=[self._rights_key(relation, left), self._lefts_key(relation, right)],
            args=[left, right],
        )
        return removed == 1

    async def exists(self, relation: str, left: str, right: str) -> bool:
        return await self.redis.zscore(self._rights_key(relation, left), right) is not None

    async def rights(self, relation: str, left: str) -> list[str]:
        return list(await self.redis.zrange(self._rights_key(relation, left), 0, -1))

    async def lefts(self, relation: str, right: str) -> list[str]:
        return list(await self.redis.zrange(self._lefts_key(relation, right), 0, -1))

    async def count_rights(self, relation: str, left: str) -> int:
        return int(await self.redis.zcard(self._rights_key(relation, left)))

    async def count_lefts(self, relation: str, right: str) -> int:
        return int(await self.redis.zcard(self._lefts_key(relation, right)))

    async def remove_left(self, relation: str, left: str) -> list[str]:
        removed = await self._remove_all(
            keys=[self._rights_key(relation, left)],
            args=[self._lefts_key(relation), left],
        )
        log.debug("Removed %d facts from %s for left %s", len(removed or []), relation, left)
        return list(removed or [])

    async def remove_right(self, relation: str, right: str) -> list[str]:
        removed = await self._remove_all(
            keys=[self._lefts_key(relation, right)],
            args=[self._rights_key(relation), right],
        )
        log.debug("Removed %d facts from %s for right %s", len(removed or []), relation, right)
        return list(removed or [])

    def lock(self, key: str):
        return advisory_lock(
            self.redis,
            f"{self.prefix}:{key}",
            timeout=self.lock_timeout,
            wait_timeout=self.lock_wait_timeout,
            retry_delay=self.lock_retry_delay,
        )

    async def close(self) -> None:
        if self._owns_client:
            await close_redis(self.redis)
