from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Sequence

from .refs import ContentRef, UserRef


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class FriendRequest:
    from_user: UserRef
    to_user: UserRef
    status: RequestStatus = RequestStatus.PENDING


@dataclass(frozen=True)
class RemixEdge:
    original: ContentRef
    remix: ContentRef
    original_artist: UserRef | None = None


class ContentRecord(Protocol):
    """The attributes the engines read off a resolved content record."""

    @property
    def ref(self) -> ContentRef: ...

    @property
    def author(self) -> UserRef: ...

    @property
    def original_artist(self) -> UserRef | None: ...


class ContentCatalog(Protocol):
    async def get_by_ids(self, refs: Sequence[ContentRef]) -> list[ContentRecord]: ...
