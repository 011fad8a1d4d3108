"""
Data models for the rate limiting system.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RateLimitConfig:
    """Configuration for a sliding-window limit."""
    limit: int = 10
    window_seconds: float = 60.0


@dataclass
class RateLimitResult:
    """Result of a rate limit check."""
    allowed: bool
    remaining: int = 0
    retry_after: Optional[int] = None  # Seconds until the oldest hit leaves the window
    message: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "allowed": self.allowed,
            "remaining": self.remaining,
            "retry_after": self.retry_after,
            "message": self.message
        }
