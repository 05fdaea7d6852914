from abc import ABC, abstractmethod
from typing import AsyncContextManager


class RelationStore(ABC):
    """
    Keyed-fact substrate under the engagement engines.

    A store holds named binary relations of ``(left, right)`` string pairs.
    Each relation is indexed both ways so lookups by either side are direct.
    ``insert`` is an atomic insert-if-absent: two concurrent inserts of the
    same pair never both report ``True``.

    ``lock(key)`` serializes multi-step read-then-write sections on one key.
    Unrelated keys never contend.
    """

    @abstractmethod
    async def insert(self, relation: str, left: str, right: str) -> bool:
        """Add the fact, returning ``False`` if it was already present."""

    @abstractmethod
    async def remove(self, relation: str, left: str, right: str) -> bool:
        """Drop the fact, returning ``False`` if it was absent."""

    @abstractmethod
    async def exists(self, relation: str, left: str, right: str) -> bool: ...

    @abstractmethod
    async def rights(self, relation: str, left: str) -> list[str]:
        """Every ``right`` paired with ``left``, oldest first."""

    @abstractmethod
    async def lefts(self, relation: str, right: str) -> list[str]:
        """Every ``left`` paired with ``right``, oldest first."""

    @abstractmethod
    async def count_rights(self, relation: str, left: str) -> int: ...

    @abstractmethod
    async def count_lefts(self, relation: str, right: str) -> int: ...

    @abstractmethod
    async def remove_left(self, relation: str, left: str) -> list[str]:
        """Drop every fact whose left side is ``left``; return the removed rights."""

    @abstractmethod
    async def remove_right(self, relation: str, right: str) -> list[str]:
        """Drop every fact whose right side is ``right``; return the removed lefts."""

    @abstractmethod
    def lock(self, key: str) -> AsyncContextManager[None]: ...

    async def close(self) -> None:
        return None
