"""Shape engine and collaborator values into response bodies."""

from typing import Sequence

from app.db.models import Post
from app.engagement.refs import UserRef
from app.engagement.types import FriendRequest
from app.schemas.friend import FriendRequestOut
from app.schemas.post import PostOut
from app.services.authing import AuthingService


async def posts(authing: AuthingService, items: Sequence[Post]) -> list[PostOut]:
    """Replace author and original-artist ids with usernames."""
    ids: list[UserRef] = []
    for p in items:
        ids.append(p.author)
        if p.original_artist is not None:
            ids.append(p.original_artist)
    names = dict(zip((r.value for r in ids), await authing.ids_to_usernames(ids)))

    return [
        PostOut(
            id=p.id,
            author=names[p.author_id],
            content=p.content,
            original_artist=names.get(p.original_artist_id) if p.original_artist_id else None,
            created_at=p.created_at,
            updated_at=p.updated_at,
        )
        for p in items
    ]


async def post(authing: AuthingService, item: Post) -> PostOut:
    return (await posts(authing, [item]))[0]


async def friend_requests(
    authing: AuthingService,
    requests: Sequence[FriendRequest],
) -> list[FriendRequestOut]:
    refs = [r.from_user for r in requests] + [r.to_user for r in requests]
    names = dict(zip((r.value for r in refs), await authing.ids_to_usernames(refs)))
    return [
        FriendRequestOut(
            from_user=names[r.from_user.value],
            to_user=names[r.to_user.value],
            status=r.status.value,
        )
        for r in requests
    ]
