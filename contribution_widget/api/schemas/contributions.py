from datetime import date

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ContributionDay(BaseModel):
    """Single day of the GitHub contribution calendar."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: date
    count: int = Field(alias="contributionCount", ge=0)
    color: str | None = None
    weekday: int | None = Field(default=None, ge=0, le=6)


class ContributionWeek(BaseModel):
    """Week column; the first and last weeks of a year may be partial."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    days: list[ContributionDay] = Field(alias="contributionDays")


class ContributionCalendar(BaseModel):
    """Trailing one-year calendar, oldest week first."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total: int = Field(alias="totalContributions", ge=0)
    weeks: list[ContributionWeek]


class ErrorResponse(BaseModel):
    """Error payload returned by the contributions API."""

    error: str
    message: str
