"""
Rate limiter for throttling per-user requests.
"""

import logging
import math
import time
from collections import deque
from threading import Lock
from typing import Callable, Deque, Dict, Optional

from .models import RateLimitConfig, RateLimitResult

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Sliding-window request limiter keyed by an arbitrary string.

    Each key keeps the timestamps of its accepted requests inside the
    window. A request is allowed while fewer than ``limit`` remain.
    """

    def __init__(
        self,
        config: RateLimitConfig,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize RateLimiter.

        Args:
            config: RateLimitConfig with limit and window size
            clock: Monotonic time source, injectable for tests
        """
        self.config = config
        self._clock = clock or time.monotonic
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = Lock()

    def check_and_consume(self, key: str) -> RateLimitResult:
        """
        Check the limit for ``key`` and record the request if allowed.

        Args:
            key: Identity being throttled (usually the user id)

        Returns:
            RateLimitResult with allowed status and details
        """
        with self._lock:
            now = self._clock()
            hits = self._prune(key, now)

            if len(hits) >= self.config.limit:
                retry_after = self._retry_after(hits, now)
                logger.warning(f"Rate limit hit: key={key}, retry_after={retry_after}s")
                return RateLimitResult(
                    allowed=False,
                    remaining=0,
                    retry_after=retry_after,
                    message=f"Too many requests, retry in {retry_after}s"
                )

            hits.append(now)
            remaining = self.config.limit - len(hits)
            return RateLimitResult(allowed=True, remaining=remaining)

    # =====================
    # Private helper methods
    # =====================

    def _prune(self, key: str, now: float) -> Deque[float]:
        """Drop timestamps that fell out of the window."""
        hits = self._hits.setdefault(key, deque())
        cutoff = now - self.config.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()
        return hits

    def _retry_after(self, hits: Deque[float], now: float) -> int:
        if not hits:
            return 0
        return max(1, math.ceil(hits[0] + self.config.window_seconds - now))
