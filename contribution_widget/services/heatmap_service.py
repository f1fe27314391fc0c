from dataclasses import dataclass
from datetime import date

from contribution_widget.api.schemas.contributions import ContributionCalendar
from contribution_widget.api.schemas.contributions import ContributionDay
from contribution_widget.core.validation import Theme


# Ordered from "no activity" to "highest activity".
LIGHT_PALETTE: tuple[str, ...] = (
    "#ebedf0",
    "#9be9a8",
    "#40c463",
    "#30a14e",
    "#216e39",
)
DARK_PALETTE: tuple[str, ...] = (
    "#161b22",
    "#0e4429",
    "#006d32",
    "#26a641",
    "#39d353",
)

TOOLTIP_OFFSET = 8


@dataclass(frozen=True)
class CellRect:
    """Bounding box of a hovered cell, in viewport pixels."""

    left: float
    top: float
    width: float
    height: float


@dataclass(frozen=True)
class TooltipPosition:
    x: float
    y: float


@dataclass(frozen=True)
class GraphCell:
    date: str
    weekday: int
    count: int
    level: int
    color: str
    label: str
    display_date: str


@dataclass(frozen=True)
class GraphColumn:
    cells: list[GraphCell]


@dataclass(frozen=True)
class GraphView:
    """Everything the graph template needs for one calendar."""

    username: str
    theme: Theme
    total: int
    columns: list[GraphColumn]
    legend: tuple[str, ...]
    tooltip_offset: int = TOOLTIP_OFFSET


def intensity_level(count: int) -> int:
    """Map daily contribution count to a heatmap level in range 0..4."""

    if count <= 0:
        return 0
    if count <= 3:
        return 1
    if count <= 6:
        return 2
    if count <= 9:
        return 3
    return 4


def palette_for(theme: Theme) -> tuple[str, ...]:
    if theme == Theme.LIGHT:
        return LIGHT_PALETTE
    return DARK_PALETTE


def color_for(count: int, theme: Theme) -> str:
    return palette_for(theme)[intensity_level(count)]


def tooltip_position(anchor: CellRect) -> TooltipPosition:
    """Center the tooltip above the hovered cell."""

    return TooltipPosition(
        x=anchor.left + anchor.width / 2,
        y=anchor.top - TOOLTIP_OFFSET,
    )


def format_date(iso_date: str) -> str:
    """Format an ISO date as e.g. "Jan 5, 2025" for display."""

    try:
        parsed = date.fromisoformat(iso_date)
    except (TypeError, ValueError):
        return iso_date
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def contribution_label(count: int) -> str:
    noun = "contribution" if count == 1 else "contributions"
    return f"{count} {noun}"


def _weekday(day: ContributionDay) -> int:
    if day.weekday is not None:
        return day.weekday
    # Sunday-first, matching GitHub's column layout.
    return (day.date.weekday() + 1) % 7


def build_graph(
    username: str, calendar: ContributionCalendar, theme: Theme
) -> GraphView:
    """Lay out calendar weeks as columns of weekday-ordered cells."""

    columns: list[GraphColumn] = []
    for week in calendar.weeks:
        cells = []
        for day in sorted(week.days, key=_weekday):
            iso_day = day.date.isoformat()
            display_date = format_date(iso_day)
            cells.append(
                GraphCell(
                    date=iso_day,
                    weekday=_weekday(day),
                    count=day.count,
                    level=intensity_level(day.count),
                    color=color_for(day.count, theme),
                    label=f"{contribution_label(day.count)} on {display_date}",
                    display_date=display_date,
                )
            )
        columns.append(GraphColumn(cells=cells))

    return GraphView(
        username=username,
        theme=theme,
        total=calendar.total,
        columns=columns,
        legend=palette_for(theme),
    )
