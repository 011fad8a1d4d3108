"""
Candidate fetching for the matching engine.

Gathers everything the scorer needs for one user from the store. The three
user-scoped reads are independent and run concurrently; the candidate
query depends on the preferences and runs afterwards.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..models import CandidateItem, HistoricalExchange, ItemStatus, UserPreferences
from ..storage import CandidateFilter, MatchingStore

logger = logging.getLogger(__name__)

# Over-fetch so the diversifier has room to skip owners and categories.
CANDIDATE_POOL_FACTOR = 3


@dataclass(slots=True)
class CandidatePool:
    """Snapshot of store data used for one recommendation request."""

    preferences: Optional[UserPreferences]
    owned_item_ids: List[str]
    historical_exchanges: List[HistoricalExchange]
    candidates: List[CandidateItem]
    total_item_count: int = 0
    category_counts: Dict[str, int] = field(default_factory=dict)


def build_candidate_filter(
    user_id: str,
    preferences: Optional[UserPreferences],
    owned_item_ids: Optional[List[str]] = None,
) -> CandidateFilter:
    """Translate a preference profile into a store filter.

    Disliked categories are excluded outright. Preferred conditions, when
    present, restrict the pool to those conditions.
    """
    excluded_categories: tuple = ()
    allowed_conditions: tuple = ()
    if preferences is not None:
        excluded_categories = tuple(preferences.disliked_categories)
        allowed_conditions = tuple(preferences.preferred_conditions)

    return CandidateFilter(
        exclude_owner_id=user_id,
        status=ItemStatus.AVAILABLE,
        excluded_categories=excluded_categories,
        allowed_conditions=allowed_conditions,
        excluded_item_ids=tuple(owned_item_ids or ()),
    )


def fetch_candidates(store: MatchingStore, user_id: str, limit: int) -> CandidatePool:
    """Load preferences, history and a bounded candidate pool for ``user_id``."""
    with ThreadPoolExecutor(max_workers=3) as pool:
        preferences_future = pool.submit(store.get_preferences, user_id)
        owned_future = pool.submit(store.list_owned_item_ids, user_id)
        history_future = pool.submit(store.list_historical_exchanges, user_id)

        preferences = preferences_future.result()
        owned_item_ids = owned_future.result()
        historical_exchanges = history_future.result()

    candidate_filter = build_candidate_filter(user_id, preferences, owned_item_ids)
    candidates = store.list_candidate_items(candidate_filter, limit * CANDIDATE_POOL_FACTOR)

    total_item_count = store.count_items()
    category_counts: Dict[str, int] = {}
    for item in candidates:
        if item.category not in category_counts:
            category_counts[item.category] = store.count_items(item.category)

    logger.debug(
        f"Fetched {len(candidates)} candidates for user {user_id} "
        f"(owned={len(owned_item_ids)}, exchanges={len(historical_exchanges)}, "
        f"has_preferences={preferences is not None})"
    )

    return CandidatePool(
        preferences=preferences,
        owned_item_ids=owned_item_ids,
        historical_exchanges=historical_exchanges,
        candidates=candidates,
        total_item_count=total_item_count,
        category_counts=category_counts,
    )
