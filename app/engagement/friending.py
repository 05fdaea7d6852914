import logging

from app.core.errors import (
    AlreadyFriends,
    DuplicateRequest,
    InvalidOperation,
    NotFound,
)

from .refs import UserRef
from .store import RelationStore
from .types import FriendRequest, RequestStatus

log = logging.getLogger(__name__)

# (from, to) for every pending request
REQUESTS = "friend_request"
# both (a, b) and (b, a) for every friendship
FRIENDS = "friend"


def _pair_key(a: UserRef, b: UserRef) -> str:
    low, high = sorted((a.value, b.value))
    return f"friending:{low}:{high}"


class FriendingEngine:
    """
    Friend requests and the friendships they produce.

    Per ordered pair a request goes ``absent -> pending`` on send and leaves
    ``pending`` by accept, reject or withdrawal. Accepted and rejected
    requests are not kept; sending again starts a fresh request.

    Every mutation holds the store lock of the unordered pair, so a
    request in one direction and a request in the other cannot both
    be created.
    """

    def __init__(self, store: RelationStore):
        self._store = store

    async def send_request(self, from_user: UserRef, to_user: UserRef) -> FriendRequest:
        if from_user == to_user:
            raise InvalidOperation("Cannot send a friend request to yourself")

        async with self._store.lock(_pair_key(from_user, to_user)):
            if await self._store.exists(FRIENDS, from_user.value, to_user.value):
                raise AlreadyFriends(f"{from_user} and {to_user} are already friends")
            if await self._store.exists(REQUESTS, to_user.value, from_user.value):
                raise DuplicateRequest(
                    f"{to_user} already sent a friend request to {from_user}; accept or reject it instead"
                )
            if not await self._store.insert(REQUESTS, from_user.value, to_user.value):
                raise DuplicateRequest(f"Friend request from {from_user} to {to_user} already pending")

        log.info("Friend request sent: %s -> %s", from_user, to_user)
        return FriendRequest(from_user, to_user, RequestStatus.PENDING)

    async def remove_request(self, from_user: UserRef, to_user: UserRef) -> None:
        """Withdraw a pending request; nothing is kept of it afterwards."""
        async with self._store.lock(_pair_key(from_user, to_user)):
            if not await self._store.remove(REQUESTS, from_user.value, to_user.value):
                raise NotFound(f"No pending friend request from {from_user} to {to_user}")

        log.info("Friend request withdrawn: %s -> %s", from_user, to_user)

    async def accept_request(self, from_user: UserRef, to_user: UserRef) -> FriendRequest:
        async with self._store.lock(_pair_key(from_user, to_user)):
            if not await self._store.remove(REQUESTS, from_user.value, to_user.value):
                raise NotFound(f"No pending friend request from {from_user} to {to_user}")
            await self._store.insert(FRIENDS, from_user.value, to_user.value)
            await self._store.insert(FRIENDS, to_user.value, from_user.value)

        log.info("Friend request accepted: %s -> %s", from_user, to_user)
        return FriendRequest(from_user, to_user, RequestStatus.ACCEPTED)

    async def reject_request(self, from_user: UserRef, to_user: UserRef) -> FriendRequest:
        async with self._store.lock(_pair_key(from_user, to_user)):
            if not await self._store.remove(REQUESTS, from_user.value, to_user.value):
                raise NotFound(f"No pending friend request from {from_user} to {to_user}")

        log.info("Friend request rejected: %s -> %s", from_user, to_user)
        return FriendRequest(from_user, to_user, RequestStatus.REJECTED)

    async def remove_friend(self, user: UserRef, friend: UserRef) -> None:
        async with self._store.lock(_pair_key(user, friend)):
            if not await self._store.remove(FRIENDS, user.value, friend.value):
                raise NotFound(f"{user} and {friend} are not friends")
            await self._store.remove(FRIENDS, friend.value, user.value)

        log.info("Friendship removed: %s <-> %s", user, friend)

    async def are_friends(self, a: UserRef, b: UserRef) -> bool:
        return await self._store.exists(FRIENDS, a.value, b.value)

    async def get_friends(self, user: UserRef) -> list[UserRef]:
        return [UserRef(v) for v in await self._store.rights(FRIENDS, user.value)]

    async def get_requests(self, user: UserRef) -> list[FriendRequest]:
        """Pending requests addressed to ``user``."""
        senders = await self._store.lefts(REQUESTS, user.value)
        return [FriendRequest(UserRef(s), user, RequestStatus.PENDING) for s in senders]

    async def get_sent_requests(self, user: UserRef) -> list[FriendRequest]:
        recipients = await self._store.rights(REQUESTS, user.value)
        return [FriendRequest(user, UserRef(r), RequestStatus.PENDING) for r in recipients]

    async def retire_identity(self, user: UserRef) -> None:
        """
        Forget every friendship and pending request involving ``user``.

        Each counterpart is cleared under its pair lock, so an accept or a
        send racing the retirement either lands first and is removed here, or
        runs after and finds nothing to act on. A final sweep drops facts
        created by a counterpart that first appeared mid-retirement.
        """
        counterparts = dict.fromkeys(
            await self._store.rights(FRIENDS, user.value)
            + await self._store.rights(REQUESTS, user.value)
            + await self._store.lefts(REQUESTS, user.value)
        )
        for other in counterparts:
            async with self._store.lock(_pair_key(user, UserRef(other))):
                await self._store.remove(FRIENDS, user.value, other)
                await self._store.remove(FRIENDS, other, user.value)
                await self._store.remove(REQUESTS, user.value, other)
                await self._store.remove(REQUESTS, other, user.value)

        swept = (
            await self._store.remove_left(FRIENDS, user.value)
            + await self._store.remove_right(FRIENDS, user.value)
            + await self._store.remove_left(REQUESTS, user.value)
            + await self._store.remove_right(REQUESTS, user.value)
        )
        log.info(
            "Identity retired from friending: %s (counterparts=%d, swept=%d)",
            user, len(counterparts), len(swept),
        )
