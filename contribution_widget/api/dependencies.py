from typing import Annotated

from fastapi import Depends
from fastapi import HTTPException
from fastapi import Request
from fastapi.templating import Jinja2Templates

from contribution_widget.core.rate_limit import SlidingWindowRateLimiter
from contribution_widget.core.rate_limit import client_key
from contribution_widget.services.contribution_service import ContributionService
from contribution_widget.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_contribution_service(request: Request) -> ContributionService:
    return request.app.state.contribution_service


def get_templates(request: Request) -> Jinja2Templates:
    return request.app.state.templates


def enforce_rate_limit(request: Request) -> None:
    """Reject the request with 429 once the caller's lookup budget is spent."""

    limiter: SlidingWindowRateLimiter = request.app.state.rate_limiter
    retry_after = limiter.acquire(client_key(request))
    if retry_after is not None:
        raise HTTPException(
            status_code=429,
            detail="Too Many Requests",
            headers={"Retry-After": str(retry_after)},
        )


SettingsDep = Annotated[Settings, Depends(get_settings)]
ContributionServiceDep = Annotated[
    ContributionService, Depends(get_contribution_service)
]
TemplatesDep = Annotated[Jinja2Templates, Depends(get_templates)]
