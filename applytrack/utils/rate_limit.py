"""Fixed-window request limiter keyed by user."""

import math
import threading
import time
from typing import Callable, Hashable


class RateLimiter:
    """Allow at most `max_requests` per key in each `window_seconds` window.

    Owned by whoever creates it (the web app keeps one on `app.state`).
    Expired windows are swept at most once per window.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[Hashable, tuple[int, float]] = {}  # key -> (count, reset_at)
        self._next_sweep = clock() + window_seconds

    def __len__(self) -> int:
        return len(self._windows)

    def _sweep(self, now: float) -> None:
        expired = [key for key, (_, reset_at) in self._windows.items() if now >= reset_at]
        for key in expired:
            del self._windows[key]
        self._next_sweep = now + self.window_seconds

    def hit(self, key: Hashable) -> tuple[bool, int]:
        """Count one request for `key`.

        Returns (allowed, retry_after_seconds); retry_after is 0 when allowed.
        """
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)

            count, reset_at = self._windows.get(key, (0, 0.0))

            if count == 0 or now >= reset_at:
                if self.max_requests < 1:
                    self._windows.pop(key, None)
                    return False, max(1, math.ceil(self.window_seconds))
                self._windows[key] = (1, now + self.window_seconds)
                return True, 0

            if count >= self.max_requests:
                return False, max(1, math.ceil(reset_at - now))

            self._windows[key] = (count + 1, reset_at)
            return True, 0

    def reset(self, key: Hashable = None) -> None:
        """Forget one key's window, or all of them."""
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)
