"""
Recommendation engine package for swap item matching.

Provides the candidate fetcher, rule-based scorer and diversifier, wired
together by ``MatchingEngine`` so the web layer or batch jobs can reuse it
without Flask dependencies.
"""

from .engine import (
    DEFAULT_LIMIT,
    MatchingEngine,
    RecommendationResponse,
    build_default_engine,
)
from .fetcher import (
    CANDIDATE_POOL_FACTOR,
    CandidatePool,
    build_candidate_filter,
    fetch_candidates,
)
from .scoring import (
    SIGNALS,
    ScoringContext,
    score_candidates,
    score_item,
)
from .diversity import (
    MAX_PER_CATEGORY,
    MAX_PER_OWNER,
    diversify,
)

__all__ = [
    "DEFAULT_LIMIT",
    "MatchingEngine",
    "RecommendationResponse",
    "build_default_engine",
    "CANDIDATE_POOL_FACTOR",
    "CandidatePool",
    "build_candidate_filter",
    "fetch_candidates",
    "SIGNALS",
    "ScoringContext",
    "score_candidates",
    "score_item",
    "MAX_PER_CATEGORY",
    "MAX_PER_OWNER",
    "diversify",
]
