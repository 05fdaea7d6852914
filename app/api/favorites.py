from fastapi import APIRouter, Depends, Query

from app.api import responses
from app.core.config import Settings
from app.db.models import User
from app.engagement import FavoritingEngine
from app.engagement.refs import ContentRef
from app.schemas.favorite import FavoriteCountOut, FavoriteToggleOut, TrendingPostOut
from app.schemas.post import PostOut
from app.services.authing import AuthingService
from app.services.posting import PostingService
from app.utils.deps import get_authing, get_current_user, get_favoriting, get_posting, get_settings

router = APIRouter(prefix="/favoriting", tags=["favoriting"])


@router.get("/trending", response_model=list[TrendingPostOut])
async def get_most_favorited(
    days: int | None = Query(None, ge=0, description="Only posts from the last N days"),
    limit: int | None = Query(None, ge=0, le=100, description="Max posts to return"),
    settings: Settings = Depends(get_settings),
    favoriting: FavoritingEngine = Depends(get_favoriting),
    posting: PostingService = Depends(get_posting),
    authing: AuthingService = Depends(get_authing),
):
    recent = await posting.get_recent(settings.TRENDING_WINDOW_DAYS if days is None else days)
    ranked = await favoriting.get_most_favorited(
        [p.ref for p in recent],
        settings.TRENDING_LIMIT if limit is None else limit,
    )
    by_id = {p.id: p for p in recent}
    shaped = await responses.posts(authing, [by_id[r.value] for r in ranked])
    return [
        TrendingPostOut(post=out, score=await favoriting.get_favorite_count(ref))
        for ref, out in zip(ranked, shaped)
    ]


@router.get("/users/{username}", response_model=list[PostOut])
async def get_favorites_by_user(
    username: str,
    favoriting: FavoritingEngine = Depends(get_favoriting),
    posting: PostingService = Depends(get_posting),
    authing: AuthingService = Depends(get_authing),
):
    user = await authing.get_by_username(username)
    favorites = await favoriting.get_favorited_by_user(user.ref)
    return await responses.posts(authing, await posting.get_by_ids(favorites))


@router.post("/{post_id}/toggle", response_model=FavoriteToggleOut)
async def toggle_favorite(
    post_id: str,
    user: User = Depends(get_current_user),
    favoriting: FavoritingEngine = Depends(get_favoriting),
    posting: PostingService = Depends(get_posting),
):
    ref = ContentRef(post_id)
    await posting.assert_exists(ref)
    favorited = await favoriting.toggle_favorite(user.ref, ref)
    return FavoriteToggleOut(
        post_id=post_id,
        favorited=favorited,
        count=await favoriting.get_favorite_count(ref),
    )


@router.get("/{post_id}/count", response_model=FavoriteCountOut)
async def get_favorite_count(
    post_id: str,
    favoriting: FavoritingEngine = Depends(get_favoriting),
    posting: PostingService = Depends(get_posting),
):
    ref = ContentRef(post_id)
    await posting.assert_exists(ref)
    return FavoriteCountOut(post_id=post_id, count=await favoriting.get_favorite_count(ref))
