from .base import RelationStore
from .memory import KeyedLock, MemoryRelationStore
from .redis_store import RedisRelationStore

__all__ = [
    "RelationStore",
    "KeyedLock",
    "MemoryRelationStore",
    "RedisRelationStore",
]
