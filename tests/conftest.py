from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from contribution_widget.clients.github_client import GitHubContributionsClient
from contribution_widget.main import create_app
from contribution_widget.settings import Settings


GRAPHQL_URL = "https://github.test/graphql"

Handler = Callable[[httpx.Request], httpx.Response]


def calendar_payload(total: int = 9) -> dict[str, object]:
    """GraphQL response body for a user with two short weeks of activity."""

    return {
        "data": {
            "user": {
                "contributionsCollection": {
                    "contributionCalendar": {
                        "totalContributions": total,
                        "weeks": [
                            {
                                "contributionDays": [
                                    {
                                        "contributionCount": 0,
                                        "date": "2025-01-05",
                                        "color": "#ebedf0",
                                        "weekday": 0,
                                    },
                                    {
                                        "contributionCount": 4,
                                        "date": "2025-01-06",
                                        "color": "#40c463",
                                        "weekday": 1,
                                    },
                                ]
                            },
                            {
                                "contributionDays": [
                                    {
                                        "contributionCount": 5,
                                        "date": "2025-01-12",
                                        "color": "#40c463",
                                        "weekday": 0,
                                    }
                                ]
                            },
                        ],
                    }
                }
            }
        }
    }


def make_github_client(handler: Handler) -> GitHubContributionsClient:
    return GitHubContributionsClient(
        graphql_url=GRAPHQL_URL,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        github_graphql_url=GRAPHQL_URL,
        sentry_dsn=None,
        rate_limit_per_minute=1000,
        rate_limit_window_seconds=60,
    )


@pytest.fixture
def calls() -> list[httpx.Request]:
    return []


@pytest.fixture
def app_client(
    test_settings: Settings, calls: list[httpx.Request]
) -> Callable[[Handler], TestClient]:
    """Build a TestClient whose GitHub endpoint is served by `handler`."""

    def factory(handler: Handler) -> TestClient:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return handler(request)

        app = create_app(
            settings=test_settings,
            github_client=make_github_client(recording_handler),
        )
        return TestClient(app)

    return factory


@pytest.fixture
def calendar_body() -> dict[str, object]:
    return calendar_payload()


@pytest.fixture
def github_client_factory() -> Callable[[Handler], GitHubContributionsClient]:
    return make_github_client
