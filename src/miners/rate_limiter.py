"""
Sliding-window rate limiter shared by API-calling collaborators.

One instance is created per API and passed to every client that talks to it,
so concurrent scans of many tokens share a single budget without relying on
module-level state.
"""

from collections import deque
import asyncio
import time

from config import logger


class RateLimiter:
    """
    Allow at most ``max_requests`` calls in any window of ``period`` seconds.

    Attributes:
        max_requests (int): Requests allowed per period
        period (float): Window length in seconds
        request_times (deque): Monotonic timestamps of admitted requests
    """

    def __init__(self, max_requests: int, period: float):
        self.max_requests = max_requests
        self.period = period
        self.request_times = deque()
        self._lock = asyncio.Lock()

    def _evict_expired(self, now: float) -> None:
        while self.request_times and (now - self.request_times[0]) >= self.period:
            self.request_times.popleft()

    async def acquire(self) -> None:
        """
        Wait until a request slot is free, then record the request.
        """
        async with self._lock:
            self._evict_expired(time.monotonic())

            # Next available slot is after the oldest request plus the period
            while len(self.request_times) >= self.max_requests:
                wait_time = self.period - (time.monotonic() - self.request_times[0])
                logger.debug(
                    {
                        "message": "Rate limit reached, waiting",
                        "wait_seconds": round(max(wait_time, 0.0), 3),
                    }
                )
                await asyncio.sleep(max(wait_time, 0.001))
                self._evict_expired(time.monotonic())

            self.request_times.append(time.monotonic())
