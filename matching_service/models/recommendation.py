"""
Recommendation output models.

Recommendations are built per request and never persisted.
"""

from enum import Enum
from typing import List, Optional
from pydantic import Field

from .base import CamelModel
from .items import CandidateItem, ItemPhoto


class ReasonType(str, Enum):
    """Signal that contributed to a recommendation score."""
    CATEGORY = "category"
    CONDITION = "condition"
    TAGS = "tags"
    POPULARITY = "popularity"
    RARITY = "rarity"
    LOCATION = "location"
    HISTORY = "history"


class RecommendationReason(CamelModel):
    type: ReasonType
    score: float = Field(description="Unrounded contribution of this signal")
    description: str


class RecommendedOwner(CamelModel):
    id: str
    display_name: str = ""
    avatar_url: Optional[str] = None


class RecommendedItem(CamelModel):
    """Projection of a candidate item returned to callers."""
    id: str
    title: str
    description: str = ""
    category: str
    condition: str
    tags: List[str] = Field(default_factory=list)
    popularity_score: float = 0.0
    owner: RecommendedOwner
    photos: List[ItemPhoto] = Field(default_factory=list)
    created_at: str = Field(description="Listing time (ISO format)")

    @classmethod
    def from_candidate(cls, item: CandidateItem) -> "RecommendedItem":
        return cls(
            id=item.id,
            title=item.title,
            description=item.description,
            category=item.category,
            condition=item.condition,
            tags=list(item.tags),
            popularity_score=item.popularity_score,
            owner=RecommendedOwner(
                id=item.owner.id,
                display_name=item.owner.display_name,
                avatar_url=item.owner.avatar_url,
            ),
            photos=list(item.photos),
            created_at=item.created_at.isoformat(),
        )


class Recommendation(CamelModel):
    """A scored item with the reasons behind its score."""
    item: RecommendedItem
    score: int = Field(description="Sum of reason scores, rounded once")
    reasons: List[RecommendationReason] = Field(default_factory=list)
