"""
Tests for owner and category diversification.
"""

from matching_service.models import Recommendation, RecommendedItem, RecommendedOwner
from matching_service.recommendations.diversity import diversify


def _make_rec(item_id, owner_id, category, score):
    return Recommendation(
        item=RecommendedItem(
            id=item_id,
            title=f"Item {item_id}",
            category=category,
            condition="GOOD",
            owner=RecommendedOwner(id=owner_id),
            created_at="2024-01-01T00:00:00+00:00",
        ),
        score=score,
        reasons=[],
    )


def _ids(recs):
    return [rec.item.id for rec in recs]


class TestDiversify:

    def test_owner_cap_keeps_two_best_per_owner(self):
        recs = [
            _make_rec("a1", "ann", "BOOKS", 90),
            _make_rec("a2", "ann", "TOYS", 80),
            _make_rec("a3", "ann", "ART", 70),
            _make_rec("b1", "ben", "GAMES", 60),
        ]
        assert _ids(diversify(recs, 10)) == ["a1", "a2", "b1"]

    def test_category_cap_keeps_three_per_category(self):
        recs = [_make_rec(f"i{i}", f"owner{i}", "BOOKS", 100 - i) for i in range(5)]
        recs.append(_make_rec("toy", "owner9", "TOYS", 10))
        assert _ids(diversify(recs, 10)) == ["i0", "i1", "i2", "toy"]

    def test_dominant_owner_is_interleaved_with_others(self):
        recs = [_make_rec(f"a{i}", "A", f"CAT{i}", 50) for i in range(10)]
        recs += [_make_rec(f"b{i}", "B", f"BCAT{i}", 40) for i in range(2)]
        recs += [_make_rec(f"c{i}", "C", f"CCAT{i}", 30) for i in range(2)]

        result = diversify(recs, 5)

        assert _ids(result) == ["a0", "a1", "b0", "b1", "c0"]
        assert [rec.item.owner.id for rec in result] == ["A", "A", "B", "B", "C"]

    def test_single_owner_under_fills(self):
        recs = [_make_rec(f"i{i}", "solo", f"CAT{i}", 50 - i) for i in range(8)]
        assert len(diversify(recs, 5)) == 2

    def test_limit_truncates(self):
        recs = [_make_rec(f"i{i}", f"o{i}", f"C{i}", 50) for i in range(6)]
        assert _ids(diversify(recs, 4)) == ["i0", "i1", "i2", "i3"]

    def test_skipped_items_are_not_reconsidered(self):
        # x3 hits the owner cap and is dropped for good
        recs = [
            _make_rec("x1", "X", "BOOKS", 90),
            _make_rec("x2", "X", "BOOKS", 80),
            _make_rec("x3", "X", "TOYS", 70),
            _make_rec("y1", "Y", "TOYS", 60),
        ]
        assert _ids(diversify(recs, 3)) == ["x1", "x2", "y1"]

    def test_custom_caps(self):
        recs = [_make_rec(f"i{i}", "same", "BOOKS", 50) for i in range(4)]
        assert len(diversify(recs, 10, max_per_owner=4, max_per_category=3)) == 3

    def test_empty_input(self):
        assert diversify([], 5) == []

    def test_input_is_not_mutated(self):
        recs = [_make_rec(f"i{i}", "same", "BOOKS", 50) for i in range(4)]
        diversify(recs, 10)
        assert len(recs) == 4
