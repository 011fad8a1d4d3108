import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from matching_service.errors import MatchingStoreError, PreferencesNotFoundError
from matching_service.models import (
    CandidateItem,
    ExchangeRecord,
    ItemOwner,
    PreferencesInput,
    UserPreferences,
)
from matching_service.recommendations import MatchingEngine, RecommendationResponse, build_default_engine
from matching_service.storage import JsonMatchingStore

LISTED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _make_item(item_id, owner_id, category, condition="GOOD", title=None, popularity=0.0, country=None):
    return CandidateItem(
        id=item_id,
        owner_id=owner_id,
        title=title or f"Item {item_id}",
        category=category,
        condition=condition,
        popularity_score=popularity,
        owner=ItemOwner(id=owner_id, display_name=owner_id.title(), country=country),
        created_at=LISTED_AT,
    )


@pytest.fixture
def store(tmp_path):
    store = JsonMatchingStore(tmp_path)
    store.save_items([
        _make_item("b1", "bob", "BOOKS", title="Dune", popularity=80, country="FR"),
        _make_item("b2", "bob", "BOOKS", title="Foundation", popularity=70),
        _make_item("b3", "bob", "BOOKS", title="Hyperion", popularity=60),
        _make_item("c1", "carol", "BOOKS", title="Neuromancer", popularity=50),
        _make_item("c2", "carol", "TOYS", title="Yo-yo", popularity=40),
        _make_item("d1", "dave", "ART", condition="FAIR", title="Canvas", popularity=30),
        _make_item("a1", "alice", "BOOKS", title="My own book", popularity=99),
    ])
    store.save_exchanges([
        ExchangeRecord(requester_id="alice", responder_id="erin",
                       requested_item_title="Foundation", offered_item_title="Lamp"),
    ])
    return store


class TestMatchingEngine:

    def test_recommendations_without_preferences(self, store):
        engine = MatchingEngine(store=store)

        response = engine.get_recommendations("alice", 10)

        assert isinstance(response, RecommendationResponse)
        ids = [rec.item.id for rec in response.recommendations]
        # own item and the already exchanged title are gone; rare categories lead
        assert ids == ["c2", "d1", "b1", "b3", "c1"]
        assert [rec.score for rec in response.recommendations] == [19, 17, 16, 13, 12]
        assert response.total == len(ids)
        assert response.user_preferences is None
        assert "userPreferences" not in response.to_dict()

    def test_preferences_shape_results(self, store):
        engine = MatchingEngine(store=store)
        engine.save_preferences("alice", {
            "preferredCategories": ["TOYS"],
            "preferredConditions": ["GOOD"],
            "country": "FR",
        })

        response = engine.get_recommendations("alice", 10)
        ids = [rec.item.id for rec in response.recommendations]

        assert ids[0] == "c2"
        assert "d1" not in ids
        assert response.user_preferences == {
            "preferredCategories": ["TOYS"],
            "preferredConditions": ["GOOD"],
            "country": "FR",
        }
        assert response.to_dict()["userPreferences"]["country"] == "FR"

    def test_scores_are_descending_and_bounded_by_limit(self, store):
        engine = MatchingEngine(store=store)

        response = engine.get_recommendations("alice", 2)
        scores = [rec.score for rec in response.recommendations]

        assert len(scores) <= 2
        assert scores == sorted(scores, reverse=True)
        assert all(score > 0 for score in scores)

    def test_repeated_calls_are_identical(self, store):
        engine = MatchingEngine(store=store)

        first = engine.get_recommendations("alice", 5).to_dict()
        second = engine.get_recommendations("alice", 5).to_dict()

        assert first == second

    def test_unknown_user_still_gets_recommendations(self, store):
        response = MatchingEngine(store=store).get_recommendations("zoe", 3)
        assert response.total == 3

    def test_save_then_get_preferences(self, store):
        engine = MatchingEngine(store=store)

        saved = engine.save_preferences("alice", PreferencesInput(preferred_categories=["ART"], radius_km=10))
        fetched = engine.get_preferences("alice")

        assert isinstance(saved["preferences"], UserPreferences)
        assert fetched["preferences"] == saved["preferences"]
        assert fetched["preferences"].radius_km == 10

    def test_get_preferences_not_found(self, store):
        engine = MatchingEngine(store=store)

        with pytest.raises(PreferencesNotFoundError) as exc_info:
            engine.get_preferences("nobody")

        assert exc_info.value.user_id == "nobody"

    def test_save_preferences_rejects_invalid_radius(self, store):
        engine = MatchingEngine(store=store)

        with pytest.raises(ValidationError):
            engine.save_preferences("alice", {"radiusKm": 0})

        with pytest.raises(ValidationError):
            engine.save_preferences("alice", {"radiusKm": 1001})

    def test_build_default_engine(self, tmp_path):
        engine = build_default_engine(tmp_path)
        assert isinstance(engine.store, JsonMatchingStore)
        assert engine.get_recommendations("alice").total == 0

    def test_items_without_listing_time_fail_instead_of_drifting(self, tmp_path):
        store = JsonMatchingStore(tmp_path)
        record = _make_item("b1", "bob", "BOOKS", popularity=10).to_dict()
        del record["createdAt"]
        (tmp_path / "items.json").write_text(json.dumps([record]), encoding="utf-8")

        with pytest.raises(MatchingStoreError):
            MatchingEngine(store=store).get_recommendations("alice", 5)
