import asyncio
from typing import Awaitable, Callable, Hashable, Sequence, TypeVar

from app.core.errors import InvalidOperation

T = TypeVar("T", bound=Hashable)


def top_by_score(candidates: Sequence[T], scores: Sequence[int], limit: int) -> list[T]:
    """
    Highest ``limit`` candidates by descending score.

    Equal scores keep their relative order from ``candidates``; when the
    candidate list is newest-first this puts the newest item first among
    ties. Repeated candidates count once, at their first position.
    """
    if limit < 0:
        raise InvalidOperation(f"limit must be non-negative, got {limit}")
    if len(scores) != len(candidates):
        raise InvalidOperation("Every candidate needs exactly one score")

    first_seen: dict[T, int] = {}
    for i, item in enumerate(candidates):
        first_seen.setdefault(item, i)

    order = sorted(first_seen.values(), key=lambda i: -scores[i])
    return [candidates[i] for i in order[:limit]]


async def rank(
    candidates: Sequence[T],
    limit: int,
    score: Callable[[T], Awaitable[int]],
) -> list[T]:
    """Score every distinct candidate concurrently, then take the top ``limit``."""
    if limit < 0:
        raise InvalidOperation(f"limit must be non-negative, got {limit}")

    unique = list(dict.fromkeys(candidates))
    if not unique or limit == 0:
        return []

    scores = await asyncio.gather(*(score(item) for item in unique))
    return top_by_score(unique, scores, limit)
