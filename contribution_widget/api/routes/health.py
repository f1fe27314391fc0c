from fastapi import APIRouter
from fastapi import Response

from contribution_widget.api.dependencies import SettingsDep


router = APIRouter()


@router.get("/")
async def root(settings: SettingsDep) -> dict[str, str]:
    """Return a service greeting with usage hints."""

    return {
        "message": "GitHub contribution graph widget",
        "page": "/{username}?theme=light|dark",
        "api": "/api/contributions/{username}",
        "environment": settings.environment,
    }


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/favicon.ico", include_in_schema=False)
def favicon() -> Response:
    """Answer browser favicon probes before they reach the username route."""

    return Response(status_code=204)
