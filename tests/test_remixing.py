import asyncio

import pytest

from app.core.errors import AlreadyRemix, InvalidOperation
from app.engagement.refs import ContentRef, UserRef
from app.engagement.types import RemixEdge


@pytest.fixture
def remixing(engagement):
    return engagement.remixing


@pytest.fixture
def posts(catalog):
    return (
        catalog.add("a", "alice"),
        catalog.add("b", "bob"),
        catalog.add("c", "carol"),
    )


async def test_create_remix_records_original_artist(remixing, posts):
    a, b, _ = posts
    edge = await remixing.create_remix(a, b)

    assert edge == RemixEdge(a, b, UserRef("alice"))
    assert await remixing.get_original_post(b) == a
    assert await remixing.get_remixes_on_post(a) == [b]
    assert await remixing.get_remix_count(a) == 1


async def test_artist_of_a_remix_is_inherited(remixing, catalog):
    original = catalog.add("r1", "bob", original_artist="alice")
    remix = catalog.add("r2", "carol")

    edge = await remixing.create_remix(original, remix)

    assert edge.original_artist == UserRef("alice")


async def test_unknown_original_has_no_artist(remixing):
    edge = await remixing.create_remix(ContentRef("x"), ContentRef("y"))
    assert edge.original_artist is None


async def test_a_post_has_one_original(remixing, posts):
    a, b, c = posts
    await remixing.create_remix(a, c)

    with pytest.raises(AlreadyRemix):
        await remixing.create_remix(b, c)
    with pytest.raises(AlreadyRemix):
        await remixing.create_remix(a, c)

    assert await remixing.get_original_post(c) == a
    assert await remixing.get_remixes_on_post(b) == []


async def test_original_of_unremixed_post_is_none(remixing, posts):
    assert await remixing.get_original_post(posts[0]) is None


async def test_cannot_remix_itself(remixing, posts):
    with pytest.raises(InvalidOperation):
        await remixing.create_remix(posts[0], posts[0])


async def test_chains_are_allowed_but_cycles_are_not(remixing, posts):
    a, b, c = posts
    await remixing.create_remix(a, b)
    await remixing.create_remix(b, c)

    assert await remixing.get_original_post(c) == b
    # one hop only
    assert await remixing.get_remixes_on_post(a) == [b]

    with pytest.raises(InvalidOperation):
        await remixing.create_remix(c, a)


async def test_delete_remix_drops_parent_and_child_edges(remixing, posts):
    a, b, c = posts
    await remixing.create_remix(a, b)
    await remixing.create_remix(b, c)

    assert await remixing.delete_remix(b) == 2

    assert await remixing.get_remixes_on_post(a) == []
    assert await remixing.get_original_post(c) is None
    assert await remixing.delete_remix(b) == 0


async def test_remix_records_come_from_catalog(remixing, catalog, posts):
    a, b, c = posts
    await remixing.create_remix(a, c)
    await remixing.create_remix(a, b)

    records = await remixing.get_remix_records(a)

    assert [r.ref for r in records] == [c, b]
    assert await remixing.get_remix_records(b) == []


async def test_most_remixed(remixing):
    o1, o2 = ContentRef("o1"), ContentRef("o2")
    for i in range(3):
        await remixing.create_remix(o2, ContentRef(f"o2-{i}"))
    await remixing.create_remix(o1, ContentRef("o1-0"))

    assert await remixing.get_most_remixed([o1, o2], 1) == [o2]
    assert await remixing.get_most_remixed([o1, o2], 5) == [o2, o1]
    assert await remixing.get_most_remixed([o1, o2], 0) == []


async def test_concurrent_remixes_of_one_post_keep_one_original(remixing, posts):
    a, b, c = posts
    results = await asyncio.gather(
        remixing.create_remix(a, c),
        remixing.create_remix(b, c),
        return_exceptions=True,
    )

    assert sum(isinstance(r, RemixEdge) for r in results) == 1
    assert sum(isinstance(r, AlreadyRemix) for r in results) == 1
    winner = next(r for r in results if isinstance(r, RemixEdge))
    assert await remixing.get_original_post(c) == winner.original
    assert await remixing.get_remix_count(a) + await remixing.get_remix_count(b) == 1


async def test_delete_remix_drops_every_child(remixing, posts):
    a, b, c = posts
    await remixing.create_remix(a, b)
    await remixing.create_remix(a, c)

    assert await remixing.delete_remix(a) == 2

    assert await remixing.get_remixes_on_post(a) == []
    assert await remixing.get_original_post(b) is None
    assert await remixing.get_original_post(c) is None
    assert await remixing.get_remix_count(a) == 0
