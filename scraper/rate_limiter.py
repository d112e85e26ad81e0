"""
Fixed-window request counter keyed by client address.

State lives in process memory only: it resets on restart and is not shared
between workers, so under horizontal scaling each instance enforces its own
limit.
"""

import time
import threading
from dataclasses import dataclass
from typing import Callable, Dict


@dataclass
class WindowState:
    count: int
    reset_time: float


class RateLimiter:
    """Allow at most ``max_requests`` per ``window_seconds`` for each key."""

    def __init__(self, max_requests: int = 10, window_seconds: float = 60,
                 clock: Callable[[], float] = time.time):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[str, WindowState] = {}
        self.lock = threading.Lock()

    def check(self, key: str) -> bool:
        """Count a request for ``key`` and return whether it is allowed."""
        now = self.clock()
        with self.lock:
            state = self._windows.get(key)

            # Expired windows are replaced on access, never swept
            if state is None or now > state.reset_time:
                self._windows[key] = WindowState(count=1, reset_time=now + self.window_seconds)
                return True

            if state.count >= self.max_requests:
                return False

            state.count += 1
            return True
