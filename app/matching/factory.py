"""
Factory for creating the matching module.
"""
from pathlib import Path

from matching_service.recommendations import MatchingEngine
from matching_service.storage import JsonMatchingStore
from app.rate_limit.factory import create_rate_limit_module
from .services import MatchingService
from .routes import create_matching_routes


def create_matching_module(
    data_dir: Path,
    default_limit: int = 20,
    recommendations_per_minute: int = 10,
    clock=None,
) -> dict:
    """Create matching module with store, service and routes.

    Args:
        data_dir: Directory holding preferences, items and exchanges
        default_limit: Recommendations returned when no limit is given
        recommendations_per_minute: Per-user throttle for recommendations
        clock: Optional time source for the rate limiter (tests)

    Returns:
        Dictionary containing the store, service, rate limiter and blueprint
    """
    data_dir.mkdir(parents=True, exist_ok=True)

    store = JsonMatchingStore(data_dir)
    engine = MatchingEngine(store=store)

    rate_limit_module = create_rate_limit_module(
        limit=recommendations_per_minute,
        window_seconds=60.0,
        clock=clock,
    )

    matching_service = MatchingService(
        engine=engine,
        rate_limiter=rate_limit_module["limiter"],
        default_limit=default_limit,
    )

    blueprint = create_matching_routes(matching_service)

    return {
        "store": store,
        "service": matching_service,
        "rate_limiter": rate_limit_module["limiter"],
        "blueprint": blueprint
    }
