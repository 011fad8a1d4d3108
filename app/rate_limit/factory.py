"""
Factory for creating rate limiting components.
"""

from .models import RateLimitConfig
from .manager import RateLimiter


def create_rate_limit_module(
    limit: int = 10,
    window_seconds: float = 60.0,
    clock=None,
) -> dict:
    """
    Create rate limiting module.

    Args:
        limit: Requests allowed per window and key
        window_seconds: Window length in seconds
        clock: Optional time source for tests

    Returns:
        Dictionary with:
        - limiter: RateLimiter instance
        - config: RateLimitConfig instance
    """
    config = RateLimitConfig(limit=limit, window_seconds=window_seconds)
    limiter = RateLimiter(config=config, clock=clock)

    return {
        "limiter": limiter,
        "config": config
    }
