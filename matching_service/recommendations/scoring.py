"""
Rule-based scoring of candidate items.

Each signal inspects one aspect of a candidate and returns a reason when it
contributes a positive amount. Signals are evaluated in ``SIGNALS`` order so
the reasons list is always ordered the same way.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from ..models import (
    CandidateItem,
    HistoricalExchange,
    ReasonType,
    Recommendation,
    RecommendationReason,
    RecommendedItem,
    UserPreferences,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------

CATEGORY_BONUS = 20
CONDITION_BONUS = 10
TAG_MATCH_POINTS = 5
TAG_BONUS_CAP = 10
POPULARITY_SCALE = 100
POPULARITY_BONUS_CAP = 15
RARITY_BONUS_CAP = 15
LOCATION_BONUS = 10
HISTORY_KEYWORD_POINTS = 5
HISTORY_BONUS_CAP = 20


@dataclass(slots=True)
class ScoringContext:
    """Per-request data shared by every signal."""

    preferences: Optional[UserPreferences] = None
    historical_exchanges: Sequence[HistoricalExchange] = field(default_factory=list)
    total_item_count: int = 0
    category_counts: Dict[str, int] = field(default_factory=dict)


Signal = Callable[[CandidateItem, ScoringContext], Optional[RecommendationReason]]


# ---------------------------------------------------------------------------
# Signals
# ---------------------------------------------------------------------------


def category_signal(item: CandidateItem, context: ScoringContext) -> Optional[RecommendationReason]:
    prefs = context.preferences
    if prefs is None or item.category not in prefs.preferred_categories:
        return None
    return RecommendationReason(
        type=ReasonType.CATEGORY,
        score=CATEGORY_BONUS,
        description=f"Preferred category: {item.category}",
    )


def condition_signal(item: CandidateItem, context: ScoringContext) -> Optional[RecommendationReason]:
    prefs = context.preferences
    if prefs is None or item.condition not in prefs.preferred_conditions:
        return None
    return RecommendationReason(
        type=ReasonType.CONDITION,
        score=CONDITION_BONUS,
        description=f"Preferred condition: {item.condition}",
    )


def tags_signal(item: CandidateItem, context: ScoringContext) -> Optional[RecommendationReason]:
    """Tags that overlap a preferred category as a substring, either way round."""
    prefs = context.preferences
    if prefs is None or not prefs.preferred_categories:
        return None

    categories = [c for c in (_normalize(cat) for cat in prefs.preferred_categories) if c]
    common_tags = []
    for tag in item.tags:
        normalized = _normalize(tag)
        if not normalized:
            continue
        if any(cat in normalized or normalized in cat for cat in categories):
            common_tags.append(tag)

    if not common_tags:
        return None
    return RecommendationReason(
        type=ReasonType.TAGS,
        score=min(len(common_tags) * TAG_MATCH_POINTS, TAG_BONUS_CAP),
        description=f"Shared tags: {', '.join(common_tags)}",
    )


def popularity_signal(item: CandidateItem, context: ScoringContext) -> Optional[RecommendationReason]:
    value = min(item.popularity_score / POPULARITY_SCALE * POPULARITY_BONUS_CAP, POPULARITY_BONUS_CAP)
    if value <= 0:
        return None
    return RecommendationReason(
        type=ReasonType.POPULARITY,
        score=value,
        description=f"Popularity: {_format_number(item.popularity_score)}",
    )


def rarity_signal(item: CandidateItem, context: ScoringContext) -> Optional[RecommendationReason]:
    value = rarity_score(context.category_counts.get(item.category, 0), context.total_item_count)
    if value <= 0:
        return None
    return RecommendationReason(
        type=ReasonType.RARITY,
        score=value,
        description=f"Category rarity: {item.category}",
    )


def location_signal(item: CandidateItem, context: ScoringContext) -> Optional[RecommendationReason]:
    prefs = context.preferences
    if prefs is None or not prefs.country or item.owner.country != prefs.country:
        return None
    return RecommendationReason(
        type=ReasonType.LOCATION,
        score=LOCATION_BONUS,
        description=f"Same country: {prefs.country}",
    )


def history_signal(item: CandidateItem, context: ScoringContext) -> Optional[RecommendationReason]:
    value = history_score(item, context.historical_exchanges)
    if value <= 0:
        return None
    return RecommendationReason(
        type=ReasonType.HISTORY,
        score=value,
        description="Historical affinity with this category",
    )


SIGNALS: List[Signal] = [
    category_signal,
    condition_signal,
    tags_signal,
    popularity_signal,
    rarity_signal,
    location_signal,
    history_signal,
]


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def rarity_score(category_count: int, total_item_count: int) -> float:
    """Inverse category frequency scaled to the rarity cap, one decimal."""
    if total_item_count <= 0:
        return 0.0
    frequency = category_count / total_item_count
    raw = max(0.0, (1 - frequency) * RARITY_BONUS_CAP)
    return math.floor(raw * 10 + 0.5) / 10


def history_score(item: CandidateItem, historical_exchanges: Sequence[HistoricalExchange]) -> float:
    """Keyword overlap between the item and past exchange titles."""
    keywords = _tokenize(item.category) + _tokenize(item.title)
    total = 0
    for exchange in historical_exchanges:
        exchange_words = set(_tokenize(exchange.requested_item_title)) | set(
            _tokenize(exchange.offered_item_title)
        )
        shared = [word for word in keywords if word in exchange_words]
        if shared:
            total += min(len(shared) * HISTORY_KEYWORD_POINTS, HISTORY_BONUS_CAP)
    return min(total, HISTORY_BONUS_CAP)


def matches_history(item: CandidateItem, historical_exchanges: Sequence[HistoricalExchange]) -> bool:
    """True when the item title resembles either title of a past exchange."""
    title = _normalize(item.title)
    if not title:
        return False
    for exchange in historical_exchanges:
        for other in (exchange.requested_item_title, exchange.offered_item_title):
            other_title = _normalize(other)
            if other_title and (title in other_title or other_title in title):
                return True
    return False


def score_item(item: CandidateItem, context: ScoringContext) -> List[RecommendationReason]:
    """Evaluate every signal for one item, keeping positive contributions."""
    reasons: List[RecommendationReason] = []
    for signal in SIGNALS:
        reason = signal(item, context)
        if reason is not None and reason.score > 0:
            reasons.append(reason)
    return reasons


def score_candidates(
    candidates: Sequence[CandidateItem],
    preferences: Optional[UserPreferences],
    historical_exchanges: Sequence[HistoricalExchange],
    user_id: str,
    total_item_count: int = 0,
    category_counts: Optional[Dict[str, int]] = None,
) -> List[Recommendation]:
    """Score candidates and return them best first.

    Items resembling a past exchange and items whose rounded score is zero
    are dropped. The sort is stable so ties keep the incoming order.
    """
    context = ScoringContext(
        preferences=preferences,
        historical_exchanges=list(historical_exchanges),
        total_item_count=total_item_count,
        category_counts=dict(category_counts or {}),
    )

    recommendations: List[Recommendation] = []
    for item in candidates:
        if matches_history(item, context.historical_exchanges):
            logger.debug(f"Skipping {item.id} for user {user_id}: matches exchange history")
            continue

        reasons = score_item(item, context)
        score = round_half_up(sum(reason.score for reason in reasons))
        if score <= 0:
            continue

        recommendations.append(
            Recommendation(
                item=RecommendedItem.from_candidate(item),
                score=score,
                reasons=reasons,
            )
        )

    recommendations.sort(key=lambda rec: rec.score, reverse=True)
    return recommendations


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _normalize(text: Optional[str]) -> Optional[str]:
    if not isinstance(text, str):
        return None
    clean = text.strip().lower()
    return clean or None


def _tokenize(text: Optional[str]) -> List[str]:
    if not isinstance(text, str):
        return []
    return text.lower().split()
