"""In-Memory Rate Limiter — fixed-window request counting per (client, route).

Invariants:
    - At most max_requests allowed per key within one window
    - A window starts at the first request for a key and lasts window_seconds
    - check() never awaits between read and write, so it is atomic under asyncio
    - Expired windows are evicted, so tracked keys are bounded by the clients
      seen within the last two windows

Design Decisions:
    - Fixed window over token bucket: matches the allow/deny contract the routes
      need, nothing more
    - Injectable clock: tests advance time without sleeping
    - ADR: process-local state, single uvicorn worker; a shared store would
      implement the same RateLimiter protocol
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class _Window:
    started_at: float
    count: int


class InMemoryRateLimiter:
    """Fixed-window limiter keyed by client identifier and route name."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[tuple[str, str], _Window] = {}
        self._last_sweep = clock()

    async def check(self, client_key: str, route: str) -> bool:
        """Count this request; True if it is within the limit."""
        now = self._clock()
        self._evict_expired(now)
        key = (client_key, route)
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self.window_seconds:
            self._windows[key] = _Window(started_at=now, count=1)
            return True
        window.count += 1
        return window.count <= self.max_requests

    def _evict_expired(self, now: float) -> None:
        """Drop finished windows, at most once per window length."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        self._windows = {
            key: window for key, window in self._windows.items()
            if now - window.started_at < self.window_seconds
        }

    def retry_after(self, client_key: str, route: str) -> int:
        """Whole seconds until the current window for the key resets."""
        window = self._windows.get((client_key, route))
        if window is None:
            return 0
        remaining = self.window_seconds - (self._clock() - window.started_at)
        return max(1, math.ceil(remaining))
