# Author: Bradley R. Kinnard — the bouncer

"""
In-process fixed-window rate limiter. Protects the provider bill from abuse.

State is a dict of identity -> RateState, alive for the life of the process.
The check-and-increment runs under a lock with no await inside, so two requests
from the same client can't both read a stale count and squeeze past the ceiling.
Expired windows are reset the next time their identity shows up; a sweep of
expired entries runs whenever the dict grows past max_keys.
"""

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from src.gateway.config import settings

log = logging.getLogger(__name__)


@dataclass
class RateState:
    window_start: float
    count: int


class RateLimitResult:
    """what happened when we checked the limit"""
    def __init__(self, allowed: bool, count: int, retry_after: int = 0):
        self.allowed = allowed
        self.count = count
        self.retry_after = retry_after  # seconds until window resets


class FixedWindowRateLimiter:

    def __init__(
        self,
        limit: int,
        window: float,
        max_keys: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        if limit < 1 or window <= 0:
            raise ValueError("limit must be >= 1 and window > 0")
        self.limit = limit
        self.window = window
        self.max_keys = max_keys
        self._clock = clock
        self._counters: dict[str, RateState] = {}
        # threading lock, not asyncio: the critical section never awaits
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitResult:
        """count one request for key and say whether it gets in"""
        now = self._clock()
        with self._lock:
            state = self._counters.get(key)
            if state is None or now - state.window_start >= self.window:
                if state is None and len(self._counters) >= self.max_keys:
                    self._sweep_locked(now)
                state = RateState(window_start=now, count=0)
                self._counters[key] = state

            if state.count >= self.limit:
                retry_after = max(1, math.ceil(state.window_start + self.window - now))
                return RateLimitResult(allowed=False, count=state.count, retry_after=retry_after)

            state.count += 1
            return RateLimitResult(allowed=True, count=state.count)

    async def is_allowed(self, key: str) -> RateLimitResult:
        result = self.hit(key)
        if not result.allowed:
            log.info(f"rate limit hit for {key}: {result.count}/{self.limit}, retry in {result.retry_after}s")
        return result

    def peek(self, key: str) -> RateState | None:
        """current state for key, or None. doesn't count as a request"""
        with self._lock:
            state = self._counters.get(key)
            return RateState(state.window_start, state.count) if state else None

    def sweep(self) -> int:
        """drop every expired identity. returns how many went"""
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        stale = [k for k, s in self._counters.items() if now - s.window_start >= self.window]
        for k in stale:
            del self._counters[k]
        if stale:
            log.debug(f"rate limiter swept {len(stale)} expired identities")
        return len(stale)

    def reset(self) -> None:
        """For testing. Forget everyone."""
        with self._lock:
            self._counters.clear()

    def __len__(self) -> int:
        return len(self._counters)


_limiter: FixedWindowRateLimiter | None = None


def get_limiter() -> FixedWindowRateLimiter:
    """process-wide limiter, built from settings on first use"""
    global _limiter
    if _limiter is None:
        _limiter = FixedWindowRateLimiter(
            limit=settings.rate_limit,
            window=settings.rate_window,
            max_keys=settings.rate_limit_max_keys,
        )
    return _limiter
