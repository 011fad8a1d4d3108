"""
Request models for the matching endpoints.
"""
from typing import Any, Dict, List
from pydantic import BaseModel, Field, ValidationError

MIN_LIMIT = 1
MAX_LIMIT = 50


class RecommendationsQuery(BaseModel):
    """Query string for GET /matching/recommendations."""
    limit: int = Field(default=20, ge=MIN_LIMIT, le=MAX_LIMIT, description="Maximum number of recommendations")


def validation_details(exc: ValidationError) -> List[Dict[str, Any]]:
    """Flatten a pydantic error into JSON-friendly entries."""
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
