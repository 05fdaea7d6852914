import pytest

from app.core.errors import InvalidOperation
from app.engagement.refs import ContentRef
from app.engagement.trending import rank, top_by_score

c1, c2, c3, c4 = (ContentRef(f"c{i}") for i in range(1, 5))


def scorer(scores: dict):
    async def score(item):
        return scores.get(item, 0)
    return score


class TestTopByScore:

    def test_orders_by_descending_score(self):
        assert top_by_score([c1, c2, c3], [1, 3, 2], 3) == [c2, c3, c1]

    def test_ties_keep_input_order(self):
        assert top_by_score([c1, c2, c3], [5, 5, 1], 2) == [c1, c2]
        assert top_by_score([c2, c1, c3], [5, 5, 1], 2) == [c2, c1]

    def test_limit_larger_than_candidates_returns_everything_ordered(self):
        assert top_by_score([c1, c2, c3], [0, 2, 1], 10) == [c2, c3, c1]

    def test_empty_candidates(self):
        assert top_by_score([], [], 5) == []

    def test_negative_limit_is_rejected(self):
        with pytest.raises(InvalidOperation):
            top_by_score([c1], [1], -1)

    def test_duplicates_count_once_at_first_position(self):
        assert top_by_score([c1, c2, c1], [1, 1, 1], 5) == [c1, c2]

    def test_mismatched_scores_are_rejected(self):
        with pytest.raises(InvalidOperation):
            top_by_score([c1, c2], [1], 1)


class TestRank:

    async def test_ranks_with_async_score(self):
        ranked = await rank([c1, c2, c3, c4], 3, scorer({c1: 5, c2: 5, c3: 1, c4: 7}))
        assert ranked == [c4, c1, c2]

    async def test_zero_limit(self):
        assert await rank([c1, c2], 0, scorer({c1: 1})) == []

    async def test_empty_candidates(self):
        assert await rank([], 3, scorer({})) == []

    async def test_negative_limit_fails_even_without_candidates(self):
        with pytest.raises(InvalidOperation):
            await rank([], -1, scorer({}))

    async def test_each_candidate_scored_once(self):
        calls = []

        async def score(item):
            calls.append(item)
            return 1

        await rank([c1, c1, c2], 5, score)
        assert sorted(calls, key=str) == [c1, c2]
