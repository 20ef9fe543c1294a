# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Sliding-window limiter for login attempts, keyed by client address."""
import time
from collections import deque


class SlidingWindowRateLimiter:
    def __init__(self, max_requests: int, window_seconds: int = 60):
        self.max_requests = max_requests
        self.window = window_seconds
        self._attempts: dict[str, deque[float]] = {}
        self._last_sweep = time.monotonic()

    @property
    def tracked_clients(self) -> int:
        return len(self._attempts)

    def is_allowed(self, key: str) -> tuple[bool, int, int]:
        """Returns (allowed, remaining, retry_after_seconds)."""
        now = time.monotonic()
        if now - self._last_sweep >= self.window:
            self._sweep(now)
        attempts = self._attempts.setdefault(key, deque())
        while attempts and attempts[0] <= now - self.window:
            attempts.popleft()
        if len(attempts) >= self.max_requests:
            retry_after = int(attempts[0] + self.window - now) + 1
            return False, 0, retry_after
        attempts.append(now)
        return True, self.max_requests - len(attempts), 0

    def _sweep(self, now: float) -> None:
        """Forget clients with no attempt inside the current window."""
        cutoff = now - self.window
        stale = [key for key, attempts in self._attempts.items() if not attempts or attempts[-1] <= cutoff]
        for key in stale:
            del self._attempts[key]
        self._last_sweep = now

    def reset(self) -> None:
        self._attempts.clear()
