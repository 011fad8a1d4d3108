"""
Rate limiting module for throttling per-user requests.
"""

from .models import RateLimitConfig, RateLimitResult
from .manager import RateLimiter

__all__ = ["RateLimitConfig", "RateLimitResult", "RateLimiter"]
