"""
Engagement subsystem: friend requests, favorites, remixes and trending.

Engines are plain instances around an injected ``RelationStore``; build
them together with ``build_engagement`` so retirement is wired once.
"""

from .factory import Engagement, build_engagement, build_store
from .favoriting import FavoritingEngine
from .friending import FriendingEngine
from .refs import ContentRef, UserRef
from .remixing import RemixingEngine
from .retirement import RetirementHub
from .types import FriendRequest, RemixEdge, RequestStatus

__all__ = [
    "Engagement",
    "build_engagement",
    "build_store",
    "FavoritingEngine",
    "FriendingEngine",
    "RemixingEngine",
    "RetirementHub",
    "ContentRef",
    "UserRef",
    "FriendRequest",
    "RemixEdge",
    "RequestStatus",
]
