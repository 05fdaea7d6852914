import logging
from datetime import datetime, timedelta, timezone
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.errors import InvalidOperation, NotAllowed, NotFound
from app.db.models import Post
from app.engagement.refs import ContentRef, UserRef
from app.engagement.retirement import RetirementHub

log = logging.getLogger(__name__)


def _clean_content(content: str) -> str:
    if not content or not content.strip():
        raise InvalidOperation("Post content must be non-empty")
    return content


class PostingService:
    """
    Authoring collaborator.

    Also serves as the content catalog for the remixing engine. Deletion
    goes through the retirement hub first, so engines drop their facts
    about a post before the row disappears.
    """

    def __init__(self, sessions: async_sessionmaker[AsyncSession], retirement: RetirementHub):
        self._sessions = sessions
        self._retirement = retirement

    async def create(
        self,
        author: UserRef,
        content: str,
        original_artist: UserRef | None = None,
    ) -> Post:
        post = Post(
            author_id=author.value,
            content=_clean_content(content),
            original_artist_id=original_artist.value if original_artist else None,
        )
        async with self._sessions() as db:
            db.add(post)
            await db.commit()
            await db.refresh(post)

        log.info("Post created: %s by %s", post.id, author)
        return post

    async def get_posts(self) -> list[Post]:
        async with self._sessions() as db:
            result = await db.execute(select(Post).order_by(Post.created_at.desc()))
            return list(result.scalars().all())

    async def get_by_author(self, author: UserRef) -> list[Post]:
        async with self._sessions() as db:
            result = await db.execute(
                select(Post)
                .where(Post.author_id == author.value)
                .order_by(Post.created_at.desc())
            )
            return list(result.scalars().all())

    async def get_by_ids(self, refs: Sequence[ContentRef]) -> list[Post]:
        """Posts in the order of ``refs``; ids without a post are skipped."""
        if not refs:
            return []
        async with self._sessions() as db:
            result = await db.execute(select(Post).where(Post.id.in_([r.value for r in refs])))
            by_id = {p.id: p for p in result.scalars().all()}
        return [by_id[r.value] for r in refs if r.value in by_id]

    async def get_recent(self, within_days: int) -> list[Post]:
        """Posts created in the last ``within_days`` days, newest first."""
        if within_days < 0:
            raise InvalidOperation(f"within_days must be non-negative, got {within_days}")
        cutoff = datetime.now(timezone.utc) - timedelta(days=within_days)
        async with self._sessions() as db:
            result = await db.execute(
                select(Post)
                .where(Post.created_at >= cutoff)
                .order_by(Post.created_at.desc())
            )
            return list(result.scalars().all())

    async def get(self, ref: ContentRef) -> Post:
        async with self._sessions() as db:
            post = await db.get(Post, ref.value)
        if post is None:
            raise NotFound(f"Post {ref} does not exist")
        return post

    async def exists(self, ref: ContentRef) -> bool:
        async with self._sessions() as db:
            return await db.get(Post, ref.value) is not None

    async def assert_exists(self, ref: ContentRef) -> None:
        await self.get(ref)

    async def assert_author_is_user(self, ref: ContentRef, user: UserRef) -> Post:
        post = await self.get(ref)
        if post.author_id != user.value:
            raise NotAllowed(f"{user} is not the author of post {ref}")
        return post

    async def update(
        self,
        ref: ContentRef,
        content: str | None = None,
        original_artist: UserRef | None = None,
    ) -> Post:
        async with self._sessions() as db:
            post = await db.get(Post, ref.value)
            if post is None:
                raise NotFound(f"Post {ref} does not exist")
            if content is not None:
                post.content = _clean_content(content)
            if original_artist is not None:
                post.original_artist_id = original_artist.value
            await db.commit()
            await db.refresh(post)
        return post

    async def delete(self, ref: ContentRef) -> None:
        await self.assert_exists(ref)
        await self._retirement.retire_content(ref)

        async with self._sessions() as db:
            post = await db.get(Post, ref.value)
            if post is not None:
                await db.delete(post)
                await db.commit()

        log.info("Post deleted: %s", ref)

    async def delete_by_author(self, author: UserRef) -> None:
        """Identity-retirement subscriber: delete every post the user wrote."""
        for post in await self.get_by_author(author):
            await self.delete(post.ref)
