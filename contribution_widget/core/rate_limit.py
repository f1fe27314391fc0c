from collections import defaultdict
from collections import deque
from collections.abc import Callable
from threading import RLock
from time import monotonic

from fastapi import Request


class SlidingWindowRateLimiter:
    """Per-client request budget over a sliding time window.

    Shared by every route that triggers a GitHub lookup, so the page and the
    API draw from one budget per client.
    """

    def __init__(
        self,
        max_requests: int = 30,
        window_seconds: int = 60,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        self.max_requests = max(1, max_requests)
        self.window_seconds = max(1, window_seconds)
        self._clock = clock
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._next_sweep = clock() + self.window_seconds
        self._lock = RLock()

    def acquire(self, client_key: str) -> int | None:
        """Record a hit for `client_key`.

        Returns None when the hit is allowed, otherwise the number of seconds
        to wait before retrying.
        """

        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._forget_idle(now)
            hits = self._hits[client_key]
            cutoff = now - self.window_seconds
            while hits and hits[0] <= cutoff:
                hits.popleft()

            if len(hits) >= self.max_requests:
                return max(1, int(self.window_seconds - (now - hits[0])))

            hits.append(now)
            return None

    def _forget_idle(self, now: float) -> None:
        # Clients with no hit inside the window hold no budget.
        cutoff = now - self.window_seconds
        idle = [
            key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff
        ]
        for key in idle:
            del self._hits[key]
        self._next_sweep = now + self.window_seconds

    def __len__(self) -> int:
        return len(self._hits)


def client_key(request: Request) -> str:
    """Identify the caller, preferring the first X-Forwarded-For hop."""

    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip() or "unknown"

    if request.client and request.client.host:
        return request.client.host

    return "unknown"
