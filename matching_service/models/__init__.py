"""
Models package for the matching engine.

This package contains the Pydantic models for preference profiles,
listed items, exchange history and recommendations.
"""

from .base import CamelModel

from .preferences import (
    PreferencesInput,
    UserPreferences
)

from .items import (
    ItemStatus,
    ItemOwner,
    ItemPhoto,
    CandidateItem,
    HistoricalExchange,
    ExchangeRecord
)

from .recommendation import (
    ReasonType,
    RecommendationReason,
    RecommendedOwner,
    RecommendedItem,
    Recommendation
)

__all__ = [
    "CamelModel",
    "PreferencesInput",
    "UserPreferences",
    "ItemStatus",
    "ItemOwner",
    "ItemPhoto",
    "CandidateItem",
    "HistoricalExchange",
    "ExchangeRecord",
    "ReasonType",
    "RecommendationReason",
    "RecommendedOwner",
    "RecommendedItem",
    "Recommendation",
]
