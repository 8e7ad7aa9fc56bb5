from datetime import date
from enum import Enum

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator


class ContributionQuartile(str, Enum):
    """Activity bucket assigned by GitHub to a single day."""

    NONE = "NONE"
    FIRST_QUARTILE = "FIRST_QUARTILE"
    SECOND_QUARTILE = "SECOND_QUARTILE"
    THIRD_QUARTILE = "THIRD_QUARTILE"
    FOURTH_QUARTILE = "FOURTH_QUARTILE"


class DateRange(BaseModel):
    """Inclusive query window; `start` never falls after `end`."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError("start must be before or equal to end")
        return self


class ContributionDay(BaseModel):
    """Single calendar day as reported by GitHub."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: date
    count: int = Field(alias="contributionCount", ge=0)
    level: ContributionQuartile = Field(alias="contributionLevel")


class ContributionWeek(BaseModel):
    """Week bucket containing chronologically ordered days."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    days: list[ContributionDay] = Field(alias="contributionDays")


class ContributionCalendar(BaseModel):
    """Contribution calendar payload with the authoritative total."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total: int = Field(alias="totalContributions", ge=0)
    weeks: list[ContributionWeek]
