"""
Preference profile models.

This module contains Pydantic models for the stored preference profile
and for the input accepted when a user saves it.
"""

from typing import List, Optional
from pydantic import ConfigDict, Field

from .base import CamelModel


class PreferencesInput(CamelModel):
    """Fields a user may submit when saving preferences.

    Every save fully replaces the stored lists, so omitted lists become empty.
    """
    model_config = ConfigDict(extra="forbid")

    preferred_categories: List[str] = Field(default_factory=list, description="Category labels the user likes")
    disliked_categories: List[str] = Field(default_factory=list, description="Category labels excluded from candidates")
    preferred_conditions: List[str] = Field(default_factory=list, description="Item conditions the user accepts (e.g., 'NEW', 'GOOD')")
    locale: Optional[str] = Field(default=None, description="Preferred locale")
    country: Optional[str] = Field(default=None, description="Country used by the location signal")
    radius_km: Optional[int] = Field(default=None, ge=1, le=1000, description="Search radius in kilometers")


class UserPreferences(CamelModel):
    """Stored preference profile, one per user."""
    user_id: str = Field(description="Owner of the profile")
    preferred_categories: List[str] = Field(default_factory=list)
    disliked_categories: List[str] = Field(default_factory=list)
    preferred_conditions: List[str] = Field(default_factory=list)
    locale: Optional[str] = None
    country: Optional[str] = None
    radius_km: Optional[int] = Field(default=None, ge=1, le=1000)
    created_at: Optional[str] = Field(default=None, description="First save time (ISO format)")
    updated_at: Optional[str] = Field(default=None, description="Last save time (ISO format)")

    def summary(self) -> dict:
        """Subset echoed back alongside recommendations."""
        return {
            "preferredCategories": list(self.preferred_categories),
            "preferredConditions": list(self.preferred_conditions),
            "country": self.country,
        }
