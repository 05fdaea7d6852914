import logging
from typing import Sequence

from app.core.errors import AlreadyRemix, InvalidOperation

from .refs import ContentRef, UserRef
from .store import RelationStore
from .trending import rank
from .types import ContentCatalog, ContentRecord, RemixEdge

log = logging.getLogger(__name__)

# (original, remix)
REMIXES = "remix"


class RemixingEngine:
    """
    Original -> remix edges between content items.

    A content item has at most one original, fixed once set; an original
    may have any number of remixes. Chains (a remix of a remix) are
    allowed, cycles are not. ``get_original_post`` answers one hop only.

    The catalog resolves content references to records, both to read the
    original artist at creation time and to list remixes for display.
    """

    def __init__(self, store: RelationStore, catalog: ContentCatalog | None = None):
        self._store = store
        self._catalog = catalog

    async def create_remix(self, original: ContentRef, remix: ContentRef) -> RemixEdge:
        if original == remix:
            raise InvalidOperation("A post cannot be a remix of itself")

        artist = await self._original_artist(original)

        async with self._store.lock(f"remix:{remix}"):
            if await self._store.count_lefts(REMIXES, remix.value):
                raise AlreadyRemix(f"{remix} is already a remix")
            await self._assert_not_ancestor(remix, original)
            if not await self._store.insert(REMIXES, original.value, remix.value):
                raise AlreadyRemix(f"{remix} is already a remix of {original}")

        log.info("Remix created: %s -> %s (artist=%s)", original, remix, artist)
        return RemixEdge(original, remix, artist)

    async def delete_remix(self, content: ContentRef) -> int:
        """
        Drop the edge to ``content``'s original and the edges of all its remixes.

        Called when the content itself is deleted. Each edge is removed under
        the lock ``create_remix`` takes for that remix. Returns the number of
        edges removed.
        """
        async with self._store.lock(f"remix:{content}"):
            removed = len(await self._store.remove_right(REMIXES, content.value))
        for child in await self._store.rights(REMIXES, content.value):
            async with self._store.lock(f"remix:{child}"):
                if await self._store.remove(REMIXES, content.value, child):
                    removed += 1
        removed += len(await self._store.remove_left(REMIXES, content.value))
        if removed:
            log.info("Remix edges removed for %s: %d", content, removed)
        return removed

    async def get_remixes_on_post(self, original: ContentRef) -> list[ContentRef]:
        return [ContentRef(v) for v in await self._store.rights(REMIXES, original.value)]

    async def get_remix_records(self, original: ContentRef) -> list[ContentRecord]:
        remixes = await self.get_remixes_on_post(original)
        if not remixes or self._catalog is None:
            return []
        return await self._catalog.get_by_ids(remixes)

    async def get_original_post(self, content: ContentRef) -> ContentRef | None:
        parents = await self._store.lefts(REMIXES, content.value)
        return ContentRef(parents[0]) if parents else None

    async def get_remix_count(self, original: ContentRef) -> int:
        return await self._store.count_rights(REMIXES, original.value)

    async def get_most_remixed(self, candidates: Sequence[ContentRef], limit: int) -> list[ContentRef]:
        return await rank(candidates, limit, self.get_remix_count)

    async def retire_content(self, content: ContentRef) -> None:
        await self.delete_remix(content)

    async def _original_artist(self, original: ContentRef) -> UserRef | None:
        if self._catalog is None:
            return None
        records = await self._catalog.get_by_ids([original])
        if not records:
            return None
        record = records[0]
        return record.original_artist or record.author

    async def _assert_not_ancestor(self, candidate: ContentRef, start: ContentRef) -> None:
        current: ContentRef | None = start
        while current is not None:
            if current == candidate:
                raise InvalidOperation(f"{candidate} is already an ancestor of {start}")
            current = await self.get_original_post(current)
