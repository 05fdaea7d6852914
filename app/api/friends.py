from fastapi import APIRouter, Depends

from app.api import responses
from app.db.models import User
from app.engagement import FriendingEngine
from app.schemas.friend import FriendListOut, FriendRequestOut
from app.services.authing import AuthingService
from app.utils.deps import get_authing, get_current_user, get_friending

router = APIRouter(prefix="/friends", tags=["friends"])


@router.get("", response_model=FriendListOut)
async def get_friends(
    user: User = Depends(get_current_user),
    friending: FriendingEngine = Depends(get_friending),
    authing: AuthingService = Depends(get_authing),
):
    names = await authing.ids_to_usernames(await friending.get_friends(user.ref))
    return FriendListOut(count=len(names), friends=names)


@router.get("/requests", response_model=list[FriendRequestOut])
async def get_requests(
    user: User = Depends(get_current_user),
    friending: FriendingEngine = Depends(get_friending),
    authing: AuthingService = Depends(get_authing),
):
    return await responses.friend_requests(authing, await friending.get_requests(user.ref))


@router.get("/requests/sent", response_model=list[FriendRequestOut])
async def get_sent_requests(
    user: User = Depends(get_current_user),
    friending: FriendingEngine = Depends(get_friending),
    authing: AuthingService = Depends(get_authing),
):
    return await responses.friend_requests(authing, await friending.get_sent_requests(user.ref))


@router.post("/requests/{to}", response_model=FriendRequestOut, status_code=201)
async def send_friend_request(
    to: str,
    user: User = Depends(get_current_user),
    friending: FriendingEngine = Depends(get_friending),
    authing: AuthingService = Depends(get_authing),
):
    recipient = await authing.get_by_username(to)
    request = await friending.send_request(user.ref, recipient.ref)
    return (await responses.friend_requests(authing, [request]))[0]


@router.delete("/requests/{to}")
async def remove_friend_request(
    to: str,
    user: User = Depends(get_current_user),
    friending: FriendingEngine = Depends(get_friending),
    authing: AuthingService = Depends(get_authing),
):
    recipient = await authing.get_by_username(to)
    await friending.remove_request(user.ref, recipient.ref)
    return {"ok": True, "message": f"Withdrew friend request to {recipient.username}"}


@router.put("/accept/{from_username}", response_model=FriendRequestOut)
async def accept_friend_request(
    from_username: str,
    user: User = Depends(get_current_user),
    friending: FriendingEngine = Depends(get_friending),
    authing: AuthingService = Depends(get_authing),
):
    sender = await authing.get_by_username(from_username)
    request = await friending.accept_request(sender.ref, user.ref)
    return (await responses.friend_requests(authing, [request]))[0]


@router.put("/reject/{from_username}", response_model=FriendRequestOut)
async def reject_friend_request(
    from_username: str,
    user: User = Depends(get_current_user),
    friending: FriendingEngine = Depends(get_friending),
    authing: AuthingService = Depends(get_authing),
):
    sender = await authing.get_by_username(from_username)
    request = await friending.reject_request(sender.ref, user.ref)
    return (await responses.friend_requests(authing, [request]))[0]


@router.delete("/{friend}")
async def remove_friend(
    friend: str,
    user: User = Depends(get_current_user),
    friending: FriendingEngine = Depends(get_friending),
    authing: AuthingService = Depends(get_authing),
):
    other = await authing.get_by_username(friend)
    await friending.remove_friend(user.ref, other.ref)
    return {"ok": True, "message": f"Unfriended {other.username}"}
