from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from contribution_widget.api.schemas.contributions import ContributionCalendar


@dataclass(frozen=True)
class CachePolicy:
    """Freshness window plus stale-serve grace period, in seconds."""

    max_age: int = 3600
    stale_while_revalidate: int = 7200

    def header_value(self, age: int = 0) -> str:
        """Render Cache-Control for a response whose data is `age` seconds old.

        Both windows keep their original end time, so a cached copy is never
        advertised as fresher than it is.
        """

        age = max(0, age)
        max_age = max(0, self.max_age - age)
        stale = max(0, self.max_age + self.stale_while_revalidate - age - max_age)
        return f"public, s-maxage={max_age}, stale-while-revalidate={stale}"


DEFAULT_CACHE_POLICY = CachePolicy()


@dataclass(frozen=True)
class Success:
    username: str
    collection: Mapping[str, Any] | None
    calendar: ContributionCalendar | None
    cache_policy: CachePolicy | None = DEFAULT_CACHE_POLICY


@dataclass(frozen=True)
class NotFound:
    username: str
    cache_policy: CachePolicy | None = DEFAULT_CACHE_POLICY


@dataclass(frozen=True)
class TransportError:
    message: str
    cache_policy: CachePolicy | None = None


@dataclass(frozen=True)
class RejectedInput:
    raw: str
    cache_policy: CachePolicy | None = None


FetchOutcome = Success | NotFound | TransportError | RejectedInput
