"""Sliding-window rate limiter for outbound API calls."""

import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from src.fetch.cache import monotonic_ms


class RateLimiterProtocol(Protocol):
    """Protocol for rate limiters.

    Allows dependency injection of rate limiter for testing.
    """

    def acquire(self, key: str) -> None:
        """Block until a request for ``key`` is allowed, then record it."""
        ...


@dataclass
class SlidingWindowRateLimiter:
    """Allows at most ``max_requests`` per key within a rolling window.

    Thread-safe; timestamps older than the window are discarded on each
    check.

    Attributes:
        max_requests: Requests permitted per window.
        window_ms: Window length in milliseconds.
    """

    max_requests: int
    window_ms: int
    clock: Callable[[], float] = field(default=monotonic_ms, repr=False)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    _requests: dict[str, deque[float]] = field(init=False, default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _rate_limited_count: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        """Validate limits."""
        if self.max_requests < 1 or self.window_ms < 1:
            msg = "max_requests and window_ms must be positive"
            raise ValueError(msg)

    def _prune(self, key: str, now: float) -> deque[float]:
        """Drop timestamps outside the window.

        Must be called while holding the lock.
        """
        window_start = now - self.window_ms
        timestamps = self._requests.setdefault(key, deque())
        while timestamps and timestamps[0] <= window_start:
            timestamps.popleft()
        return timestamps

    def allow(self, key: str) -> bool:
        """Record a request if the key is under its limit.

        Args:
            key: Bucket identifier (e.g. an API name or caller id).

        Returns:
            True if the request is allowed, False otherwise.
        """
        with self._lock:
            now = self.clock()
            timestamps = self._prune(key, now)
            if len(timestamps) >= self.max_requests:
                self._rate_limited_count += 1
                return False
            timestamps.append(now)
            return True

    def acquire(self, key: str) -> None:
        """Block until a request is allowed, then record it.

        Args:
            key: Bucket identifier.
        """
        while True:
            with self._lock:
                now = self.clock()
                timestamps = self._prune(key, now)
                if len(timestamps) < self.max_requests:
                    timestamps.append(now)
                    return
                wait_ms = timestamps[0] + self.window_ms - now
                self._rate_limited_count += 1

            # Release lock before sleeping
            self.sleep(max(wait_ms, 1.0) / 1000.0)

    @property
    def rate_limited_count(self) -> int:
        """Get the number of rate-limited events."""
        with self._lock:
            return self._rate_limited_count

    def clear(self) -> None:
        """Forget all recorded requests."""
        with self._lock:
            self._requests.clear()
