import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from typing import Protocol

from fastapi import BackgroundTasks

from contribution_widget.api.schemas.contributions import ContributionCalendar
from contribution_widget.core.validation import process_username
from contribution_widget.services.cache import OutcomeCache
from contribution_widget.services.outcomes import FetchOutcome
from contribution_widget.services.outcomes import NotFound
from contribution_widget.services.outcomes import RejectedInput
from contribution_widget.services.outcomes import Success
from contribution_widget.services.outcomes import TransportError


logger = logging.getLogger(__name__)

INVALID_USERNAME_MESSAGE = (
    "Username must be 1-39 characters and contain only alphanumeric "
    "characters and hyphens"
)
GENERIC_ERROR_MESSAGE = "An error occurred while fetching data"


class ContributionsClient(Protocol):
    graphql_url: str

    async def fetch_contributions(self, username: str) -> FetchOutcome:
        """Fetch contributions for an already validated username."""


@dataclass(frozen=True)
class LoadResult:
    outcome: FetchOutcome
    age: int = 0


@dataclass(frozen=True)
class OutcomeView:
    """HTTP-facing rendition of a fetch outcome, shared by the page and API."""

    kind: str
    status_code: int
    username: str | None = None
    error: str | None = None
    message: str | None = None
    cache_control: str | None = None
    calendar: ContributionCalendar | None = None
    collection: Mapping[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.status_code == 200


def describe_outcome(outcome: FetchOutcome, age: int = 0) -> OutcomeView:
    """Translate a fetch outcome into status, error copy and cache directive.

    `age` is how long the outcome has sat in the cache; it shortens the
    advertised freshness.
    """

    if isinstance(outcome, RejectedInput):
        return OutcomeView(
            kind="rejected",
            status_code=400,
            error="Invalid GitHub username format",
            message=INVALID_USERNAME_MESSAGE,
        )

    if isinstance(outcome, NotFound):
        return OutcomeView(
            kind="not_found",
            status_code=404,
            username=outcome.username,
            error="User not found",
            message=f'GitHub user "{outcome.username}" does not exist',
            cache_control=_cache_control(outcome, age),
        )

    if isinstance(outcome, TransportError):
        return OutcomeView(
            kind="transport_error",
            status_code=500,
            error="GitHub API error",
            message=GENERIC_ERROR_MESSAGE,
        )

    if outcome.collection is None or outcome.calendar is None:
        return OutcomeView(
            kind="no_data",
            status_code=404,
            username=outcome.username,
            error="No data",
            message="No contribution data available",
        )

    return OutcomeView(
        kind="ok",
        status_code=200,
        username=outcome.username,
        cache_control=_cache_control(outcome, age),
        calendar=outcome.calendar,
        collection=outcome.collection,
    )


def _cache_control(outcome: Success | NotFound, age: int) -> str | None:
    if outcome.cache_policy is None:
        return None
    return outcome.cache_policy.header_value(age)


class ContributionService:
    """Validate, look up the cache, and fetch contributions for one request."""

    def __init__(
        self, client: ContributionsClient, cache: OutcomeCache | None = None
    ) -> None:
        self.client = client
        self.cache = cache

    def cache_key(self, username: str) -> str:
        return f"{self.client.graphql_url}#{username}"

    async def load(
        self, raw_username: str, background_tasks: BackgroundTasks | None = None
    ) -> LoadResult:
        username = process_username(raw_username)
        if username is None:
            return LoadResult(RejectedInput(raw=raw_username))

        if self.cache is not None:
            cached = self.cache.get(self.cache_key(username))
            if cached is not None and not cached.stale:
                return LoadResult(cached.outcome, cached.age)
            if cached is not None and background_tasks is not None:
                logger.debug("Serving stale contributions for %s", username)
                background_tasks.add_task(self.refresh, username)
                return LoadResult(cached.outcome, cached.age)

        return LoadResult(await self.refresh(username))

    async def refresh(self, username: str) -> FetchOutcome:
        outcome = await self.client.fetch_contributions(username)
        if self.cache is not None:
            self.cache.set(self.cache_key(username), outcome)
        return outcome
