"""Fixed-window rate limiting for upstream model calls.

A RateLimiter holds one or more RateWindows (per-minute and per-hour by
default). A call goes through only when every window has room; windows are
checked before any of them is charged, so a denial never consumes budget.

State is in-memory and per instance — a fresh limiter starts empty. Under a
single event loop no locking is needed; share one limiter per session.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from assistant.config import Settings

logger = logging.getLogger(__name__)

MINUTE_MS = 60_000
HOUR_MS = 3_600_000


class RateLimitError(Exception):
    """Raised by RateLimiter.acquire() when a window is exhausted.

    Attributes:
        retry_after: Seconds until the blocking window resets.
    """

    def __init__(self, retry_after: float) -> None:
        super().__init__(f"Rate limit reached; retry in {retry_after:.0f}s")
        self.retry_after = retry_after


@dataclass
class RateWindow:
    """One fixed window: at most ``limit`` calls per ``window_ms``.

    ``window_start`` stays None until the first acquisition.
    """

    limit: int
    window_ms: int
    window_start: float | None = None
    count: int = 0

    def _roll(self, now: float) -> None:
        if self.window_start is None or now - self.window_start > self.window_ms:
            self.window_start = now
            self.count = 0

    def has_room(self, now: float) -> bool:
        """Resets an expired window, then reports whether a call fits."""
        self._roll(now)
        return self.count < self.limit

    def try_acquire(self, now: float) -> bool:
        """Charges one call if the window has room.

        Args:
            now: Current time in milliseconds.

        Returns:
            True if the call is allowed; False (without mutation) if denied.
        """
        if not self.has_room(now):
            return False
        self.count += 1
        return True

    def retry_after(self, now: float) -> float:
        """Seconds until this window resets (0 if it is not blocking)."""
        if self.window_start is None or self.count < self.limit:
            return 0.0
        return max(0.0, (self.window_start + self.window_ms - now) / 1000)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class RateLimiter:
    """Gates outbound calls across several fixed windows.

    Args:
        windows: The windows that must all have room for a call.
        clock: Returns the current time in milliseconds.
    """

    def __init__(
        self,
        windows: Sequence[RateWindow],
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        if not windows:
            raise ValueError("RateLimiter needs at least one window")
        self._windows = list(windows)
        self._clock = clock

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Callable[[], float] = _monotonic_ms,
    ) -> RateLimiter:
        return cls(
            [
                RateWindow(limit=settings.requests_per_minute, window_ms=MINUTE_MS),
                RateWindow(limit=settings.requests_per_hour, window_ms=HOUR_MS),
            ],
            clock=clock,
        )

    @property
    def windows(self) -> list[RateWindow]:
        return list(self._windows)

    def try_acquire(self, now: float | None = None) -> bool:
        """Charges every window if all have room.

        Args:
            now: Current time in milliseconds; defaults to the clock.
        """
        if now is None:
            now = self._clock()
        if not all(window.has_room(now) for window in self._windows):
            return False
        for window in self._windows:
            window.count += 1
        return True

    def acquire(self, now: float | None = None) -> None:
        """Like try_acquire(), but raises on denial.

        Raises:
            RateLimitError: With the wait until the blocking window resets.
        """
        if now is None:
            now = self._clock()
        if self.try_acquire(now):
            return
        retry_after = max(window.retry_after(now) for window in self._windows)
        logger.info("Rate limit reached, retry in %.0fs", retry_after)
        raise RateLimitError(retry_after)
