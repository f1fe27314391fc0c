import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from contribution_widget.api.routes import contributions
from contribution_widget.api.routes import health
from contribution_widget.api.routes import pages
from contribution_widget.clients.github_client import GitHubContributionsClient
from contribution_widget.core.app_logging import configure_logging
from contribution_widget.core.observability import init_sentry
from contribution_widget.core.rate_limit import SlidingWindowRateLimiter
from contribution_widget.services.cache import OutcomeCache
from contribution_widget.services.contribution_service import ContributionService
from contribution_widget.settings import Settings


logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.github_client.close()


def create_app(
    settings: Settings | None = None,
    github_client: GitHubContributionsClient | None = None,
) -> FastAPI:
    """Build the application with its GitHub client, cache and routers."""

    settings = settings or Settings()
    configure_logging(settings.log_level)
    init_sentry(settings)

    app = FastAPI(title="GitHub Contribution Widget", lifespan=lifespan)

    client = github_client or GitHubContributionsClient.create(settings)
    cache = (
        OutcomeCache(max_entries=settings.cache_max_entries)
        if settings.response_cache_enabled
        else None
    )

    app.state.settings = settings
    app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    app.state.github_client = client
    app.state.contribution_service = ContributionService(client=client, cache=cache)

    app.state.rate_limiter = SlidingWindowRateLimiter(
        max_requests=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
    )

    app.include_router(health.router)
    app.include_router(contributions.router)
    # Catch-all username route goes last.
    app.include_router(pages.router)

    logger.info("Contribution widget ready (environment=%s)", settings.environment)
    return app


app = create_app()
