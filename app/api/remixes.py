import logging

from fastapi import APIRouter, Depends, Query

from app.api import responses
from app.core.config import Settings
from app.db.models import User
from app.engagement import RemixingEngine
from app.engagement.refs import ContentRef
from app.schemas.favorite import TrendingPostOut
from app.schemas.post import PostOut
from app.schemas.remix import OriginalOut, RemixCreate, RemixOut
from app.services.authing import AuthingService
from app.services.posting import PostingService
from app.utils.deps import get_authing, get_current_user, get_posting, get_remixing, get_settings

log = logging.getLogger(__name__)

router = APIRouter(prefix="/remixing", tags=["remixing"])


@router.get("/trending", response_model=list[TrendingPostOut])
async def get_most_remixed(
    days: int | None = Query(None, ge=0, description="Only posts from the last N days"),
    limit: int | None = Query(None, ge=0, le=100, description="Max posts to return"),
    settings: Settings = Depends(get_settings),
    remixing: RemixingEngine = Depends(get_remixing),
    posting: PostingService = Depends(get_posting),
    authing: AuthingService = Depends(get_authing),
):
    recent = await posting.get_recent(settings.TRENDING_WINDOW_DAYS if days is None else days)
    ranked = await remixing.get_most_remixed(
        [p.ref for p in recent],
        settings.TRENDING_LIMIT if limit is None else limit,
    )
    by_id = {p.id: p for p in recent}
    shaped = await responses.posts(authing, [by_id[r.value] for r in ranked])
    return [
        TrendingPostOut(post=out, score=await remixing.get_remix_count(ref))
        for ref, out in zip(ranked, shaped)
    ]


@router.post("/{post_id}/remixes", response_model=RemixOut, status_code=201)
async def create_remix(
    post_id: str,
    data: RemixCreate,
    user: User = Depends(get_current_user),
    remixing: RemixingEngine = Depends(get_remixing),
    posting: PostingService = Depends(get_posting),
    authing: AuthingService = Depends(get_authing),
):
    original = ContentRef(post_id)
    remix = ContentRef(data.remix_id)
    await posting.assert_exists(original)
    await posting.assert_author_is_user(remix, user.ref)

    edge = await remixing.create_remix(original, remix)
    artist_name = None
    if edge.original_artist is not None:
        await posting.update(remix, original_artist=edge.original_artist)
        artist_name = (await authing.ids_to_usernames([edge.original_artist]))[0]

    return RemixOut(original_id=post_id, remix_id=data.remix_id, original_artist=artist_name)


@router.get("/{post_id}/remixes", response_model=list[PostOut])
async def get_post_remixes(
    post_id: str,
    remixing: RemixingEngine = Depends(get_remixing),
    posting: PostingService = Depends(get_posting),
    authing: AuthingService = Depends(get_authing),
):
    ref = ContentRef(post_id)
    await posting.assert_exists(ref)
    return await responses.posts(authing, await remixing.get_remix_records(ref))


@router.get("/{post_id}/original", response_model=OriginalOut)
async def get_original_post(
    post_id: str,
    remixing: RemixingEngine = Depends(get_remixing),
    posting: PostingService = Depends(get_posting),
    authing: AuthingService = Depends(get_authing),
):
    ref = ContentRef(post_id)
    await posting.assert_exists(ref)
    original = await remixing.get_original_post(ref)
    if original is None:
        return OriginalOut(post_id=post_id, original=None)
    records = await posting.get_by_ids([original])
    if not records:
        log.warning("Remix %s points at missing original %s", ref, original)
        return OriginalOut(post_id=post_id, original=None)
    return OriginalOut(post_id=post_id, original=await responses.post(authing, records[0]))
