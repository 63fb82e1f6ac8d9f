import time
from typing import Callable, Dict, Tuple

from src.app.services.rate_limiter import IRateLimiter


class InMemoryRateLimiter(IRateLimiter):
    """
    Fixed-window counter held in process memory.

    Only suitable for a single worker; multi-worker deployments need a
    shared store behind IRateLimiter. Expired windows are swept at most
    once per window length, so idle keys do not accumulate.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        # key -> (window deadline, hits so far)
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._clock = clock
        self._last_sweep = clock()

    async def hit(self, key: str, limit: int, window_seconds: int) -> bool:
        now = self._clock()
        if now - self._last_sweep >= window_seconds:
            self._sweep(now)

        deadline, count = self._windows.get(key, (now + window_seconds, 0))
        if now >= deadline:
            deadline, count = now + window_seconds, 0
        count += 1
        self._windows[key] = (deadline, count)
        return count <= limit

    def _sweep(self, now: float) -> None:
        self._windows = {
            key: window for key, window in self._windows.items() if window[0] > now
        }
        self._last_sweep = now

    def __len__(self) -> int:
        return len(self._windows)

    def reset(self) -> None:
        self._windows.clear()
