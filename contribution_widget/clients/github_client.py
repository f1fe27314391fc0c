import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from contribution_widget.api.schemas.contributions import ContributionCalendar
from contribution_widget.services.outcomes import DEFAULT_CACHE_POLICY
from contribution_widget.services.outcomes import CachePolicy
from contribution_widget.services.outcomes import FetchOutcome
from contribution_widget.services.outcomes import NotFound
from contribution_widget.services.outcomes import Success
from contribution_widget.services.outcomes import TransportError
from contribution_widget.settings import Settings


logger = logging.getLogger(__name__)

CONTRIBUTIONS_QUERY = """
query($username: String!) {
  user(login: $username) {
    contributionsCollection {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            contributionCount
            date
            color
            weekday
          }
        }
      }
    }
  }
}
"""


@dataclass
class GitHubContributionsClient:
    """Fetch one year of contribution data from the GitHub GraphQL API.

    Every failure is returned as a `FetchOutcome` value; nothing raises
    past `fetch_contributions`.
    """

    graphql_url: str
    http_client: httpx.AsyncClient
    user_agent: str = "github-contribution-widget"
    timeout: float = 20.0
    cache_policy: CachePolicy = DEFAULT_CACHE_POLICY

    @classmethod
    def create(cls, settings: Settings) -> "GitHubContributionsClient":
        """Create a client with a managed httpx session."""

        return cls(
            graphql_url=settings.github_graphql_url,
            http_client=httpx.AsyncClient(),
            user_agent=settings.github_user_agent,
            timeout=settings.github_timeout_seconds,
            cache_policy=CachePolicy(
                max_age=settings.cache_max_age_seconds,
                stale_while_revalidate=settings.cache_stale_seconds,
            ),
        )

    async def fetch_contributions(self, username: str) -> FetchOutcome:
        # No credentials are attached; only the identifying header is sent.
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }

        try:
            response = await self.http_client.post(
                self.graphql_url,
                json={
                    "query": CONTRIBUTIONS_QUERY,
                    "variables": {"username": username},
                },
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload: Any = response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            reason = exc.response.reason_phrase
            return self._transport_error(f"GitHub API error: {status} {reason}")
        except httpx.TimeoutException:
            return self._transport_error("GitHub API request timed out")
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return self._transport_error(
                str(exc) or "Failed to fetch contributions"
            )
        except ValueError:
            return self._transport_error("GitHub GraphQL response is not valid JSON")

        return self._classify(username, payload)

    async def close(self) -> None:
        """Close the underlying HTTP session."""

        await self.http_client.aclose()

    def _classify(self, username: str, payload: Any) -> FetchOutcome:
        if not isinstance(payload, Mapping):
            return self._transport_error("GitHub GraphQL response is invalid")

        data = payload.get("data")
        # Only an explicit null user means "no such login".
        if isinstance(data, Mapping) and "user" in data and data["user"] is None:
            logger.info("GitHub user %s not found", username)
            return NotFound(username=username, cache_policy=self.cache_policy)

        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            first_error = errors[0]
            message = (
                first_error.get("message") if isinstance(first_error, Mapping) else None
            )
            if not isinstance(message, str) or not message:
                message = "Failed to fetch contributions"
            return self._transport_error(message)

        user = data.get("user") if isinstance(data, Mapping) else None
        collection = (
            user.get("contributionsCollection") if isinstance(user, Mapping) else None
        )
        if not isinstance(collection, Mapping):
            collection = None

        raw_calendar = (
            collection.get("contributionCalendar") if collection is not None else None
        )
        calendar = None
        if isinstance(raw_calendar, Mapping):
            try:
                calendar = ContributionCalendar.model_validate(raw_calendar)
            except ValidationError:
                return self._transport_error(
                    "GitHub contribution calendar is malformed"
                )

        return Success(
            username=username,
            collection=collection,
            calendar=calendar,
            cache_policy=self.cache_policy,
        )

    @staticmethod
    def _transport_error(message: str) -> TransportError:
        logger.warning("GitHub contributions request failed: %s", message)
        return TransportError(message=message)
