"""
Matching engine: personalized item recommendations for swap users.

Pipeline per request: fetch candidates -> score -> diversify. The engine
keeps no state between requests besides its store reference, so it can be
shared by the web layer or any batch job without Flask dependencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from ..errors import PreferencesNotFoundError
from ..models import PreferencesInput, Recommendation, UserPreferences
from ..storage import MatchingStore
from .diversity import diversify
from .fetcher import fetch_candidates
from .scoring import score_candidates

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20


@dataclass(slots=True)
class RecommendationResponse:
    """Container for engine output."""

    recommendations: List[Recommendation]
    user_preferences: Optional[Dict[str, Any]] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total(self) -> int:
        return len(self.recommendations)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "recommendations": [rec.to_dict() for rec in self.recommendations],
            "total": self.total,
        }
        if self.user_preferences is not None:
            data["userPreferences"] = self.user_preferences
        return data


class MatchingEngine:
    """Scores and diversifies candidate items for a user."""

    def __init__(self, store: MatchingStore):
        self.store = store

    def get_recommendations(self, user_id: str, limit: int = DEFAULT_LIMIT) -> RecommendationResponse:
        pool = fetch_candidates(self.store, user_id, limit)

        scored = score_candidates(
            pool.candidates,
            pool.preferences,
            pool.historical_exchanges,
            user_id,
            total_item_count=pool.total_item_count,
            category_counts=pool.category_counts,
        )
        selected = diversify(scored, limit)

        logger.info(
            f"Recommendations for user {user_id}: candidates={len(pool.candidates)}, "
            f"scored={len(scored)}, returned={len(selected)}, limit={limit}"
        )

        return RecommendationResponse(
            recommendations=selected,
            user_preferences=pool.preferences.summary() if pool.preferences else None,
        )

    def save_preferences(
        self,
        user_id: str,
        fields: Union[PreferencesInput, Mapping[str, Any]],
    ) -> Dict[str, UserPreferences]:
        """Create or fully replace the user's preference profile."""
        if not isinstance(fields, PreferencesInput):
            fields = PreferencesInput.model_validate(dict(fields))
        preferences = self.store.upsert_preferences(user_id, fields)
        return {"preferences": preferences}

    def get_preferences(self, user_id: str) -> Dict[str, UserPreferences]:
        preferences = self.store.get_preferences(user_id)
        if preferences is None:
            raise PreferencesNotFoundError(user_id)
        return {"preferences": preferences}


def build_default_engine(data_dir) -> MatchingEngine:
    """Factory for an engine backed by the JSON file store."""
    from ..storage import JsonMatchingStore

    return MatchingEngine(store=JsonMatchingStore(data_dir))
