from fastapi import APIRouter
from fastapi import BackgroundTasks
from fastapi import Depends
from fastapi.responses import JSONResponse

from contribution_widget.api.dependencies import ContributionServiceDep
from contribution_widget.api.dependencies import enforce_rate_limit
from contribution_widget.api.schemas.contributions import ErrorResponse
from contribution_widget.services.contribution_service import describe_outcome


router = APIRouter(
    prefix="/api/contributions",
    tags=["contributions"],
    dependencies=[Depends(enforce_rate_limit)],
)


@router.get(
    "/{username}",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_contributions(
    username: str,
    service: ContributionServiceDep,
    background_tasks: BackgroundTasks,
) -> JSONResponse:
    """Return the user's contributionsCollection as reported by GitHub."""

    result = await service.load(username, background_tasks)
    view = describe_outcome(result.outcome, result.age)

    headers = {}
    if view.cache_control:
        headers["Cache-Control"] = view.cache_control

    if view.ok:
        content = dict(view.collection or {})
    else:
        content = ErrorResponse(
            error=view.error or "Error",
            message=view.message or "",
        ).model_dump()

    return JSONResponse(
        status_code=view.status_code,
        content=content,
        headers=headers,
    )
