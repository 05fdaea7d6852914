import logging
from typing import Sequence

from .refs import ContentRef, UserRef
from .store import RelationStore
from .trending import rank

log = logging.getLogger(__name__)

# (user, content)
FAVORITES = "favorite"


class FavoritingEngine:
    """
    Toggleable favorites between users and content.

    Content references are trusted: callers confirm the post exists
    before toggling.
    """

    def __init__(self, store: RelationStore):
        self._store = store

    async def toggle_favorite(self, user: UserRef, content: ContentRef) -> bool:
        """Flip membership; return ``True`` when the content is now favorited."""
        async with self._store.lock(f"favorite:{user}:{content}"):
            if await self._store.insert(FAVORITES, user.value, content.value):
                favorited = True
            else:
                await self._store.remove(FAVORITES, user.value, content.value)
                favorited = False

        log.debug("Favorite toggled: user=%s content=%s favorited=%s", user, content, favorited)
        return favorited

    async def is_favorited(self, user: UserRef, content: ContentRef) -> bool:
        return await self._store.exists(FAVORITES, user.value, content.value)

    async def get_favorited_by_user(self, user: UserRef) -> list[ContentRef]:
        return [ContentRef(v) for v in await self._store.rights(FAVORITES, user.value)]

    async def get_favorite_count(self, content: ContentRef) -> int:
        return await self._store.count_lefts(FAVORITES, content.value)

    async def get_most_favorited(self, candidates: Sequence[ContentRef], limit: int) -> list[ContentRef]:
        return await rank(candidates, limit, self.get_favorite_count)

    async def retire_content(self, content: ContentRef) -> None:
        """
        Drop every favorite of ``content``.

        Each favorite is removed under the same lock ``toggle_favorite``
        takes, then a sweep clears any favorite added meanwhile.
        """
        users = await self._store.lefts(FAVORITES, content.value)
        for user in users:
            await self._unfavorite(UserRef(user), content)
        swept = await self._store.remove_right(FAVORITES, content.value)
        log.info("Content retired from favoriting: %s (favorites=%d)", content, len(users) + len(swept))

    async def retire_identity(self, user: UserRef) -> None:
        contents = await self._store.rights(FAVORITES, user.value)
        for content in contents:
            await self._unfavorite(user, ContentRef(content))
        swept = await self._store.remove_left(FAVORITES, user.value)
        log.info("Identity retired from favoriting: %s (favorites=%d)", user, len(contents) + len(swept))

    async def _unfavorite(self, user: UserRef, content: ContentRef) -> None:
        async with self._store.lock(f"favorite:{user}:{content}"):
            await self._store.remove(FAVORITES, user.value, content.value)
