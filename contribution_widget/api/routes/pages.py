from fastapi import APIRouter
from fastapi import BackgroundTasks
from fastapi import Depends
from fastapi import Query
from fastapi import Request
from fastapi.responses import HTMLResponse

from contribution_widget.api.dependencies import ContributionServiceDep
from contribution_widget.api.dependencies import TemplatesDep
from contribution_widget.api.dependencies import enforce_rate_limit
from contribution_widget.core.validation import validate_theme
from contribution_widget.services.contribution_service import INVALID_USERNAME_MESSAGE
from contribution_widget.services.contribution_service import describe_outcome
from contribution_widget.services.heatmap_service import build_graph


router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

# Page copy differs from the API bodies; transport errors keep the generic text.
PAGE_MESSAGES = {
    "rejected": f"Invalid GitHub username format. {INVALID_USERNAME_MESSAGE}.",
    "not_found": (
        "The GitHub user you're looking for doesn't exist. "
        "Please check the username and try again."
    ),
    "no_data": "No contribution data available for this user",
}
PAGE_TITLES = {
    "not_found": "User Not Found",
    "no_data": "No Data",
}


@router.get("/{username}", response_class=HTMLResponse)
async def contribution_page(
    request: Request,
    username: str,
    service: ContributionServiceDep,
    templates: TemplatesDep,
    background_tasks: BackgroundTasks,
    theme: str | None = Query(default=None),
) -> HTMLResponse:
    """Render the contribution graph page for a GitHub user."""

    selected_theme = validate_theme(theme)
    result = await service.load(username, background_tasks)
    view = describe_outcome(result.outcome, result.age)

    headers = {}
    if view.cache_control:
        headers["Cache-Control"] = view.cache_control

    if not view.ok or view.calendar is None or view.username is None:
        message = PAGE_MESSAGES.get(view.kind, view.message)
        return templates.TemplateResponse(
            request,
            "error.html",
            {
                "status_code": view.status_code,
                "title": PAGE_TITLES.get(view.kind, "Error"),
                "message": message,
                "theme": selected_theme,
            },
            status_code=view.status_code,
            headers=headers,
        )

    graph = build_graph(view.username, view.calendar, selected_theme)
    return templates.TemplateResponse(
        request,
        "graph.html",
        {"graph": graph, "theme": selected_theme},
        headers=headers,
    )
