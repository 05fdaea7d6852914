from fastapi import APIRouter, Depends, Query

from app.api import responses
from app.db.models import User
from app.engagement.refs import ContentRef
from app.schemas.post import PostCreate, PostCreated, PostOut, PostUpdate
from app.services.authing import AuthingService
from app.services.posting import PostingService
from app.utils.deps import get_authing, get_current_user, get_posting

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=list[PostOut])
async def get_posts(
    author: str | None = Query(None, min_length=1, description="Only posts by this username"),
    posting: PostingService = Depends(get_posting),
    authing: AuthingService = Depends(get_authing),
):
    if author:
        author_user = await authing.get_by_username(author)
        items = await posting.get_by_author(author_user.ref)
    else:
        items = await posting.get_posts()
    return await responses.posts(authing, items)


@router.post("", response_model=PostCreated, status_code=201)
async def create_post(
    data: PostCreate,
    user: User = Depends(get_current_user),
    posting: PostingService = Depends(get_posting),
    authing: AuthingService = Depends(get_authing),
):
    created = await posting.create(user.ref, data.content)
    return PostCreated(msg="Post successfully created!", post=await responses.post(authing, created))


@router.patch("/{post_id}", response_model=PostOut)
async def update_post(
    post_id: str,
    data: PostUpdate,
    user: User = Depends(get_current_user),
    posting: PostingService = Depends(get_posting),
    authing: AuthingService = Depends(get_authing),
):
    ref = ContentRef(post_id)
    await posting.assert_author_is_user(ref, user.ref)
    updated = await posting.update(ref, content=data.content)
    return await responses.post(authing, updated)


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    user: User = Depends(get_current_user),
    posting: PostingService = Depends(get_posting),
):
    ref = ContentRef(post_id)
    await posting.assert_author_is_user(ref, user.ref)
    await posting.delete(ref)
    return {"ok": True, "message": "Deleted post successfully!"}
