"""In-process cache for GitHub fetch outcomes."""

from collections.abc import Callable
from dataclasses import dataclass
from threading import RLock
from time import monotonic

from contribution_widget.services.outcomes import FetchOutcome


@dataclass(frozen=True)
class CachedOutcome:
    outcome: FetchOutcome
    stale: bool
    age: int


@dataclass
class _CacheEntry:
    outcome: FetchOutcome
    stored_at: float
    fresh_until: float
    expires_at: float


class OutcomeCache:
    """Honor each outcome's cache policy: serve fresh, then stale, then evict.

    Outcomes without a cache policy (rejected input, transport errors) are
    never stored. Expired entries are swept on writes at most once per
    `sweep_interval`; past `max_entries` the oldest writes are dropped.
    """

    def __init__(
        self,
        clock: Callable[[], float] = monotonic,
        max_entries: int = 10_000,
        sweep_interval: float = 60.0,
    ) -> None:
        self._clock = clock
        self.max_entries = max(1, max_entries)
        self.sweep_interval = sweep_interval
        self._entries: dict[str, _CacheEntry] = {}
        self._next_sweep = clock() + sweep_interval
        self._lock = RLock()

    def get(self, key: str) -> CachedOutcome | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if now >= entry.expires_at:
                self._entries.pop(key, None)
                return None
            return CachedOutcome(
                outcome=entry.outcome,
                stale=now >= entry.fresh_until,
                age=int(now - entry.stored_at),
            )

    def set(self, key: str, outcome: FetchOutcome) -> None:
        policy = outcome.cache_policy
        if policy is None:
            return
        now = self._clock()
        fresh_until = now + policy.max_age
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            # Re-insert so dict order stays oldest-write first.
            self._entries.pop(key, None)
            self._entries[key] = _CacheEntry(
                outcome=outcome,
                stored_at=now,
                fresh_until=fresh_until,
                expires_at=fresh_until + policy.stale_while_revalidate,
            )
            while len(self._entries) > self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _sweep(self, now: float) -> None:
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]
        self._next_sweep = now + self.sweep_interval

    def __len__(self) -> int:
        return len(self._entries)
