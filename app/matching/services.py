"""
Matching services bridging Flask requests and the matching engine.
"""
import logging
from typing import Any, Dict, Optional

from flask import request

from matching_service.models import PreferencesInput
from matching_service.recommendations import MatchingEngine
from matching_service.storage import is_valid_user_id
from app.rate_limit import RateLimiter, RateLimitResult
from .models import RecommendationsQuery

logger = logging.getLogger(__name__)


class MatchingService:
    """Service for recommendation and preference endpoints."""

    def __init__(self, engine: MatchingEngine, rate_limiter: RateLimiter, default_limit: int = 20):
        self.engine = engine
        self.rate_limiter = rate_limiter
        self.default_limit = default_limit

    def get_current_user_id(self) -> Optional[str]:
        """Get the current user ID from cookies."""
        uid = (request.cookies.get("uid") or "").strip()
        if not is_valid_user_id(uid):
            if uid:
                logger.warning(f"Rejected malformed uid cookie: {uid[:64]!r}")
            return None
        return uid

    def require_auth_json(self) -> tuple[Optional[str], Optional[dict]]:
        """Require a user for JSON endpoints, return error if missing."""
        uid = self.get_current_user_id()
        if not uid:
            return None, {"error": "no-uid"}
        return uid, None

    def parse_recommendations_query(self) -> RecommendationsQuery:
        """Validate the query string; raises pydantic.ValidationError."""
        raw: Dict[str, Any] = {"limit": request.args.get("limit", self.default_limit)}
        return RecommendationsQuery.model_validate(raw)

    def parse_preferences_input(self) -> PreferencesInput:
        """Validate the JSON body; raises pydantic.ValidationError."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        return PreferencesInput.model_validate(data)

    def check_rate_limit(self, uid: str) -> RateLimitResult:
        return self.rate_limiter.check_and_consume(f"recommendations:{uid}")

    def recommendations_for(self, uid: str, limit: int) -> dict:
        return self.engine.get_recommendations(uid, limit).to_dict()

    def save_preferences(self, uid: str, fields: PreferencesInput) -> dict:
        result = self.engine.save_preferences(uid, fields)
        return {"preferences": result["preferences"].to_dict()}

    def get_preferences(self, uid: str) -> dict:
        result = self.engine.get_preferences(uid)
        return {"preferences": result["preferences"].to_dict()}
