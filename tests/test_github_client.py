"""Tests for GitHub GraphQL outcome classification."""

import asyncio
import json

import httpx

from contribution_widget.clients.github_client import GitHubContributionsClient
from contribution_widget.services.outcomes import DEFAULT_CACHE_POLICY
from contribution_widget.services.outcomes import CachePolicy
from contribution_widget.services.outcomes import NotFound
from contribution_widget.services.outcomes import Success
from contribution_widget.services.outcomes import TransportError
from contribution_widget.settings import Settings


def test_fetch_posts_fixed_query_with_username_variable(
    github_client_factory, calendar_body
) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=calendar_body)

    client = github_client_factory(handler)

    asyncio.run(client.fetch_contributions("octocat"))

    assert len(seen) == 1
    request = seen[0]
    body = json.loads(request.content.decode())
    assert request.method == "POST"
    assert body["variables"] == {"username": "octocat"}
    assert "contributionCalendar" in body["query"]
    assert request.headers["User-Agent"] == "github-contribution-widget"
    assert "Authorization" not in request.headers


def test_fetch_returns_success_with_parsed_calendar(
    github_client_factory, calendar_body
) -> None:
    client = github_client_factory(
        lambda request: httpx.Response(200, json=calendar_body)
    )

    outcome = asyncio.run(client.fetch_contributions("octocat"))

    assert isinstance(outcome, Success)
    assert outcome.username == "octocat"
    assert outcome.calendar is not None
    assert outcome.calendar.total == 9
    assert len(outcome.calendar.weeks) == 2
    assert outcome.collection == (
        calendar_body["data"]["user"]["contributionsCollection"]
    )
    assert outcome.cache_policy == DEFAULT_CACHE_POLICY


def test_fetch_maps_null_user_to_not_found(github_client_factory) -> None:
    client = github_client_factory(
        lambda request: httpx.Response(200, json={"data": {"user": None}})
    )

    outcome = asyncio.run(client.fetch_contributions("ghost-user"))

    assert outcome == NotFound(username="ghost-user")
    assert outcome.cache_policy is not None


def test_fetch_prefers_not_found_over_error_list(github_client_factory) -> None:
    payload = {
        "data": {"user": None},
        "errors": [{"type": "NOT_FOUND", "message": "Could not resolve to a User"}],
    }
    client = github_client_factory(lambda request: httpx.Response(200, json=payload))

    outcome = asyncio.run(client.fetch_contributions("ghost-user"))

    assert isinstance(outcome, NotFound)


def test_fetch_maps_error_list_to_transport_error(github_client_factory) -> None:
    client = github_client_factory(
        lambda request: httpx.Response(
            200, json={"errors": [{"message": "rate limited"}, {"message": "other"}]}
        )
    )

    outcome = asyncio.run(client.fetch_contributions("octocat"))

    assert outcome == TransportError(message="rate limited")
    assert outcome.cache_policy is None


def test_fetch_maps_non_2xx_status_to_transport_error(github_client_factory) -> None:
    client = github_client_factory(lambda request: httpx.Response(502))

    outcome = asyncio.run(client.fetch_contributions("octocat"))

    assert isinstance(outcome, TransportError)
    assert outcome.message == "GitHub API error: 502 Bad Gateway"


def test_fetch_maps_network_failure_to_transport_error(github_client_factory) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = github_client_factory(handler)

    outcome = asyncio.run(client.fetch_contributions("octocat"))

    assert isinstance(outcome, TransportError)
    assert outcome.message


def test_fetch_maps_timeout_to_transport_error(github_client_factory) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = github_client_factory(handler)

    outcome = asyncio.run(client.fetch_contributions("octocat"))

    assert outcome == TransportError(message="GitHub API request timed out")


def test_fetch_maps_invalid_json_to_transport_error(github_client_factory) -> None:
    client = github_client_factory(
        lambda request: httpx.Response(200, content=b"<html>oops</html>")
    )

    outcome = asyncio.run(client.fetch_contributions("octocat"))

    assert isinstance(outcome, TransportError)


def test_fetch_maps_malformed_calendar_to_transport_error(
    github_client_factory,
) -> None:
    payload = {
        "data": {
            "user": {
                "contributionsCollection": {
                    "contributionCalendar": {"totalContributions": "many"}
                }
            }
        }
    }
    client = github_client_factory(lambda request: httpx.Response(200, json=payload))

    outcome = asyncio.run(client.fetch_contributions("octocat"))

    assert outcome == TransportError(message="GitHub contribution calendar is malformed")


def test_fetch_returns_success_without_data_when_collection_missing(
    github_client_factory,
) -> None:
    client = github_client_factory(
        lambda request: httpx.Response(200, json={"data": {"user": {}}})
    )

    outcome = asyncio.run(client.fetch_contributions("octocat"))

    assert isinstance(outcome, Success)
    assert outcome.collection is None
    assert outcome.calendar is None


def test_create_uses_settings() -> None:
    settings = Settings(
        github_graphql_url="https://example.test/graphql",
        github_user_agent="widget-test",
        github_timeout_seconds=5.0,
        cache_max_age_seconds=60,
        cache_stale_seconds=120,
    )

    client = GitHubContributionsClient.create(settings)

    try:
        assert client.graphql_url == "https://example.test/graphql"
        assert client.user_agent == "widget-test"
        assert client.timeout == 5.0
        assert client.cache_policy == CachePolicy(max_age=60, stale_while_revalidate=120)
    finally:
        asyncio.run(client.close())


def test_cache_policy_header_value() -> None:
    assert DEFAULT_CACHE_POLICY.header_value() == (
        "public, s-maxage=3600, stale-while-revalidate=7200"
    )


def test_fetch_maps_invalid_url_to_transport_error(calendar_body) -> None:
    client = GitHubContributionsClient(
        graphql_url="https://github.test:abc/graphql",
        http_client=httpx.AsyncClient(
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, json=calendar_body)
            )
        ),
    )

    outcome = asyncio.run(client.fetch_contributions("octocat"))

    assert isinstance(outcome, TransportError)
    assert outcome.message


def test_fetch_maps_invalid_url_from_transport_to_transport_error(
    github_client_factory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.InvalidURL("Invalid non-printable ASCII character in URL")

    client = github_client_factory(handler)

    outcome = asyncio.run(client.fetch_contributions("octocat"))

    assert outcome == TransportError(
        message="Invalid non-printable ASCII character in URL"
    )
