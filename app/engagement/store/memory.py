import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager

from .base import RelationStore

log = logging.getLogger(__name__)


class KeyedLock:
    """asyncio locks created on demand per key and dropped once nobody holds or awaits them."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def __call__(self, key: str):
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                log.debug("Lock acquired: %s", key)
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class MemoryRelationStore(RelationStore):
    """
    Single-process store.

    Mutations contain no ``await`` between the membership check and the
    write, so each one runs to completion before another task is scheduled.
    Insertion order is kept by using dicts as ordered sets.
    """

    def __init__(self):
        self._forward: dict[str, defaultdict[str, dict[str, None]]] = defaultdict(lambda: defaultdict(dict))
        self._reverse: dict[str, defaultdict[str, dict[str, None]]] = defaultdict(lambda: defaultdict(dict))
        self._locks = KeyedLock()

    async def insert(self, relation: str, left: str, right: str) -> bool:
        rights = self._forward[relation][left]
        if right in rights:
            return False
        rights[right] = None
        self._reverse[relation][right][left] = None
        return True

    async def remove(self, relation: str, left: str, right: str) -> bool:
        rights = self._forward[relation].get(left)
        if not rights or right not in rights:
            return False
        del rights[right]
        if not rights:
            del self._forward[relation][left]
        self._drop(self._reverse[relation], right, left)
        return True

    async def exists(self, relation: str, left: str, right: str) -> bool:
        return right in self._forward[relation].get(left, {})

    async def rights(self, relation: str, left: str) -> list[str]:
        return list(self._forward[relation].get(left, {}))

    async def lefts(self, relation: str, right: str) -> list[str]:
        return list(self._reverse[relation].get(right, {}))

    async def count_rights(self, relation: str, left: str) -> int:
        return len(self._forward[relation].get(left, {}))

    async def count_lefts(self, relation: str, right: str) -> int:
        return len(self._reverse[relation].get(right, {}))

    async def remove_left(self, relation: str, left: str) -> list[str]:
        removed = list(self._forward[relation].pop(left, {}))
        for right in removed:
            self._drop(self._reverse[relation], right, left)
        return removed

    async def remove_right(self, relation: str, right: str) -> list[str]:
        removed = list(self._reverse[relation].pop(right, {}))
        for left in removed:
            self._drop(self._forward[relation], left, right)
        return removed

    def lock(self, key: str):
        return self._locks(key)

    @staticmethod
    def _drop(index: dict[str, dict[str, None]], key: str, member: str) -> None:
        members = index.get(key)
        if members is None:
            return
        members.pop(member, None)
        if not members:
            del index[key]
