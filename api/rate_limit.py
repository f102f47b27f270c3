"""Per-client fixed-window rate limiting."""

from __future__ import annotations

import threading
import time
from typing import Callable


class RateLimiter:
    """Allow at most ``max_requests`` per client within each ``window_sec`` window."""

    def __init__(
        self,
        max_requests: int,
        window_sec: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_sec = window_sec
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, tuple[float, int]] = {}

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_sec:
                started, count = now, 0
            if count >= self.max_requests:
                self._windows[key] = (started, count)
                return False
            self._windows[key] = (started, count + 1)
            self._prune(now)
            return True

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _prune(self, now: float) -> None:
        if len(self._windows) < 1024:
            return
        expired = [key for key, (started, _) in self._windows.items() if now - started >= self.window_sec]
        for key in expired:
            del self._windows[key]
