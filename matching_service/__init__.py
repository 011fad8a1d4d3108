# Matching service package for swap item recommendations

from .errors import (
    MatchingError,
    MatchingStoreError,
    PreferencesNotFoundError,
)
from .storage import (
    CandidateFilter,
    JsonMatchingStore,
    MatchingStore,
)
from .recommendations import (
    MatchingEngine,
    RecommendationResponse,
    build_default_engine,
    diversify,
    fetch_candidates,
    score_candidates,
)
from .logging_config import (
    setup_logging,
    stop_logging,
    get_logger,
    ThreadSafeLoggingConfig,
)

__all__ = [
    "MatchingError",
    "MatchingStoreError",
    "PreferencesNotFoundError",
    "CandidateFilter",
    "JsonMatchingStore",
    "MatchingStore",
    "MatchingEngine",
    "RecommendationResponse",
    "build_default_engine",
    "diversify",
    "fetch_candidates",
    "score_candidates",
    "setup_logging",
    "stop_logging",
    "get_logger",
    "ThreadSafeLoggingConfig",
]
