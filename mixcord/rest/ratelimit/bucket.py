"""
Per-route rate limiter driven by the API's rate-limit headers.
"""

import asyncio
import math
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import httpx

from mixcord.shared.logging import get_logger


LIMIT_HEADER = "X-RateLimit-Limit"
REMAINING_HEADER = "X-RateLimit-Remaining"
RESET_HEADER = "X-RateLimit-Reset"


@dataclass(frozen=True)
class RateLimitBucket:
    """Rate-limit accounting for one route, as last reported by the API."""
    limit: Optional[int]
    remaining: int
    reset_at: float

    def wait_time(self, now: float) -> float:
        """Seconds until a request may be sent, 0.0 if it may go now."""
        if self.remaining > 0 or now >= self.reset_at:
            return 0.0
        return self.reset_at - now


def parse_headers(headers: Mapping[str, str]) -> Optional[RateLimitBucket]:
    """Build a bucket from response headers.

    Returns None unless all three rate-limit headers are present and parse.
    A reset that is not a finite number (inf, nan, overflow) does not parse.
    """
    if not isinstance(headers, httpx.Headers):
        headers = httpx.Headers(headers)

    limit = headers.get(LIMIT_HEADER)
    remaining = headers.get(REMAINING_HEADER)
    reset = headers.get(RESET_HEADER)
    if limit is None or remaining is None or reset is None:
        return None

    try:
        bucket = RateLimitBucket(
            limit=int(limit),
            remaining=int(remaining),
            reset_at=float(reset)
        )
    except ValueError:
        return None

    if not math.isfinite(bucket.reset_at):
        return None
    return bucket


class RateLimiter:
    """Keeps one bucket per route and holds back calls on exhausted routes.

    Every route has its own asyncio lock, so waiting on one route never
    stalls calls to another. No lock is held while sleeping.
    """

    def __init__(self,
                 max_wait: Optional[float] = None,
                 clock: Callable[[], float] = time.time,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
                 on_wait: Optional[Callable[[str, float], None]] = None):
        self.max_wait = max_wait
        self.logger = get_logger("mixcord.rest.ratelimiter")
        self._clock = clock
        self._sleep = sleep
        self._on_wait = on_wait
        self._buckets: Dict[str, RateLimitBucket] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _get_lock(self, route: str) -> asyncio.Lock:
        """Get the lock guarding a route's bucket."""
        lock = self._locks.get(route)
        if lock is None:
            lock = self._locks.setdefault(route, asyncio.Lock())
        return lock

    async def wait_for_capacity(self, route: str) -> None:
        """Wait until the route's bucket allows another request."""
        # Locks are only created for routes that have a bucket.
        if route not in self._buckets:
            return

        async with self._get_lock(route):
            bucket = self._buckets.get(route)
            if bucket is None:
                return
            wait_time = bucket.wait_time(self._clock())

        if wait_time <= 0:
            return

        if self.max_wait is not None and wait_time > self.max_wait:
            self.logger.warning(
                "Rate limit wait capped",
                route=route,
                wait_time=wait_time,
                max_wait=self.max_wait
            )
            wait_time = self.max_wait

        self.logger.info(
            "Rate limit exhausted, waiting for reset",
            route=route,
            limit=bucket.limit,
            reset_at=bucket.reset_at,
            wait_time=round(wait_time, 3)
        )
        if self._on_wait is not None:
            self._on_wait(route, wait_time)
        await self._sleep(wait_time)

    async def record_headers(self, route: str, headers: Mapping[str, str]) -> bool:
        """Store the bucket reported by a response.

        A response without a complete, well-formed header triple leaves the
        route's bucket as it was. Returns whether the bucket was written.
        """
        bucket = parse_headers(headers)
        if bucket is None:
            self.logger.debug("No rate limit headers in response", route=route)
            return False

        async with self._get_lock(route):
            self._buckets[route] = bucket

        self.logger.debug(
            "Rate limit bucket updated",
            route=route,
            limit=bucket.limit,
            remaining=bucket.remaining,
            reset_at=bucket.reset_at
        )
        return True

    def get_bucket(self, route: str) -> Optional[RateLimitBucket]:
        """Get the current bucket for a route, if any."""
        return self._buckets.get(route)

    def get_stats(self) -> Dict[str, Any]:
        """Get a snapshot of all known buckets."""
        now = self._clock()
        return {
            route: {
                "limit": bucket.limit,
                "remaining": bucket.remaining,
                "reset_at": bucket.reset_at,
                "reset_in_seconds": max(0.0, bucket.reset_at - now)
            }
            for route, bucket in self._buckets.items()
        }
