"""
Item and exchange-history models.

Read-only snapshots handed to the matching engine by the store.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import Field

from .base import CamelModel


class ItemStatus(str, Enum):
    """Lifecycle status of a listed item."""
    AVAILABLE = "AVAILABLE"
    PENDING = "PENDING"
    TRADED = "TRADED"
    ARCHIVED = "ARCHIVED"


class ItemOwner(CamelModel):
    """Public owner data attached to an item."""
    id: str
    display_name: str = ""
    avatar_url: Optional[str] = None
    country: Optional[str] = None


class ItemPhoto(CamelModel):
    id: str
    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class CandidateItem(CamelModel):
    """Listed item as seen by the scorer."""
    id: str
    owner_id: str
    title: str
    description: str = ""
    category: str
    condition: str
    status: ItemStatus = ItemStatus.AVAILABLE
    tags: List[str] = Field(default_factory=list)
    popularity_score: float = Field(default=0.0, ge=0)
    owner: ItemOwner
    photos: List[ItemPhoto] = Field(default_factory=list)
    created_at: datetime = Field(description="Listing time")


class HistoricalExchange(CamelModel):
    """Titles of the two items involved in a past exchange."""
    requested_item_title: str = ""
    offered_item_title: str = ""


class ExchangeRecord(HistoricalExchange):
    """Stored exchange with its participants."""
    id: Optional[str] = None
    requester_id: str
    responder_id: str

    def involves(self, user_id: str) -> bool:
        return user_id in (self.requester_id, self.responder_id)
