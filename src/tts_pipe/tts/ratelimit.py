"""
Request Spacing.

Enforces a minimum gap between outbound requests across all threads that
share one RateLimiter.

Each caller reserves the next free slot ``max(now, last + delay)`` under the
lock, then sleeps until that slot with the lock released. Concurrent callers
therefore get strictly spaced slots without blocking one another while they
wait.

Example:
    limiter = RateLimiter(delay_s=0.05)
    limiter.acquire()   # returns immediately
    limiter.acquire()   # returns ~50ms later
"""
from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from tts_pipe.core.logging import debug, get_logger

_LOG = get_logger("tts-pipe.ratelimit")


class RateLimiter:
    """
    Minimum-interval limiter shared by all workers of a client.

    Args:
        delay_s: Minimum seconds between two acquired slots (0 disables).
        clock: Monotonic time source, injectable for tests.
        sleep: Sleep function, injectable for tests.
    """

    def __init__(
        self,
        delay_s: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if delay_s < 0:
            raise ValueError(f"delay_s must be non-negative, got {delay_s}")
        self.delay_s = float(delay_s)
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last: Optional[float] = None

    def reserve(self) -> float:
        """
        Reserve the next slot without waiting.

        Returns:
            Seconds the caller must wait before its request may start.
        """
        with self._lock:
            now = self._clock()
            slot = now if self._last is None else max(now, self._last + self.delay_s)
            self._last = slot
        return slot - now

    def acquire(self) -> float:
        """
        Block until the caller's slot arrives.

        Returns:
            Seconds spent waiting.
        """
        wait = self.reserve()
        if wait > 0:
            debug(_LOG, "rate_limit_wait", seconds=round(wait, 4))
            self._sleep(wait)
        return wait
