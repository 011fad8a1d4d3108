"""
Matching routes for recommendations and preference profiles.
"""
import logging

from flask import Blueprint, jsonify
from pydantic import ValidationError

from matching_service.errors import MatchingStoreError, PreferencesNotFoundError
from .models import validation_details
from .services import MatchingService

logger = logging.getLogger(__name__)


def create_matching_routes(matching_service: MatchingService) -> Blueprint:
    """Create matching routes."""
    bp = Blueprint('matching', __name__, url_prefix="/matching")

    @bp.errorhandler(MatchingStoreError)
    def store_failure(exc):
        logger.error(f"Matching store failure: {exc}")
        return jsonify({"error": "store-unavailable", "message": str(exc)}), 500

    @bp.route("/recommendations", methods=["GET"])
    def get_recommendations():
        """Return diversified recommendations for the current user."""
        uid, error = matching_service.require_auth_json()
        if error:
            return jsonify(error), 400

        try:
            query = matching_service.parse_recommendations_query()
        except ValidationError as exc:
            return jsonify({"error": "invalid-input", "details": validation_details(exc)}), 400

        limit_result = matching_service.check_rate_limit(uid)
        if not limit_result.allowed:
            resp = jsonify({"error": "rate-limited", **limit_result.to_dict()})
            resp.status_code = 429
            resp.headers["Retry-After"] = str(limit_result.retry_after or 1)
            return resp

        return jsonify(matching_service.recommendations_for(uid, query.limit))

    @bp.route("/preferences", methods=["POST"])
    def save_preferences():
        """Create or replace the current user's preferences."""
        uid, error = matching_service.require_auth_json()
        if error:
            return jsonify(error), 400

        try:
            fields = matching_service.parse_preferences_input()
        except ValidationError as exc:
            return jsonify({"error": "invalid-input", "details": validation_details(exc)}), 400

        return jsonify(matching_service.save_preferences(uid, fields))

    @bp.route("/preferences", methods=["GET"])
    def get_preferences():
        """Get the current user's preferences."""
        uid, error = matching_service.require_auth_json()
        if error:
            return jsonify(error), 400

        try:
            return jsonify(matching_service.get_preferences(uid))
        except PreferencesNotFoundError:
            return jsonify({"error": "preferences-not-found"}), 404

    return bp
