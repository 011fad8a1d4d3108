"""
Diversification of a scored recommendation list.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from ..models import Recommendation

logger = logging.getLogger(__name__)

MAX_PER_OWNER = 2
MAX_PER_CATEGORY = 3


def diversify(
    recommendations: Sequence[Recommendation],
    limit: int,
    max_per_owner: int = MAX_PER_OWNER,
    max_per_category: int = MAX_PER_CATEGORY,
) -> List[Recommendation]:
    """Select up to ``limit`` items while capping owner and category repeats.

    Single greedy pass over the best-first list. A skipped item is never
    reconsidered, so the result can be shorter than ``limit``.
    """
    selected: List[Recommendation] = []
    owner_counts: Dict[str, int] = {}
    category_counts: Dict[str, int] = {}

    for rec in recommendations:
        if len(selected) >= limit:
            break

        owner_id = rec.item.owner.id
        category = rec.item.category

        if owner_counts.get(owner_id, 0) >= max_per_owner:
            continue
        if category_counts.get(category, 0) >= max_per_category:
            continue

        selected.append(rec)
        owner_counts[owner_id] = owner_counts.get(owner_id, 0) + 1
        category_counts[category] = category_counts.get(category, 0) + 1

    if len(selected) < limit:
        logger.debug(
            f"Diversification returned {len(selected)}/{limit} items "
            f"from {len(recommendations)} scored candidates"
        )

    return selected
