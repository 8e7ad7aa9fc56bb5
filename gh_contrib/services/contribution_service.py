import logging
import re
from datetime import date
from datetime import datetime
from datetime import timedelta

import httpx
from pydantic import ValidationError

from gh_contrib.api.schemas.contributions import ContributionCalendar
from gh_contrib.api.schemas.contributions import ContributionDay
from gh_contrib.api.schemas.contributions import DateRange
from gh_contrib.github_api import build_query_variables
from gh_contrib.github_api import fetch_authenticated_user
from gh_contrib.github_api import fetch_contribution_calendar

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 5
DATE_FORMAT = "%Y-%m-%d"
_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


class ContribError(Exception):
    """Base class for errors that abort a run with a user-facing message."""


class AuthError(ContribError):
    """Raised when the GitHub session is missing or rejected."""


class InvalidDateFormat(ContribError):
    """Raised when a date flag is not a valid YYYY-MM-DD date."""


class InvalidRange(ContribError):
    """Raised when the start of the window falls after its end."""


class FetchError(ContribError):
    """Raised when the contribution query fails."""


def parse_day(raw_value: str, flag: str) -> date:
    if not _DATE_PATTERN.fullmatch(raw_value):
        raise InvalidDateFormat(f"invalid '{flag}' date format")
    try:
        return datetime.strptime(raw_value, DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDateFormat(f"invalid '{flag}' date format") from exc


def resolve_date_range(
    from_value: str | None,
    to_value: str | None,
    today: date | None = None,
) -> DateRange:
    """Turn the optional date flags into a validated window.

    Missing bounds default to the last five days ending today.

    Raises:
        InvalidDateFormat: If a flag is not a strict YYYY-MM-DD date.
        InvalidRange: If `from` is after `to`.
    """

    today = today or date.today()
    start = (
        parse_day(from_value, "from")
        if from_value is not None
        else today - timedelta(days=DEFAULT_WINDOW_DAYS)
    )
    end = parse_day(to_value, "to") if to_value is not None else today

    if start > end:
        raise InvalidRange("'from' date must be before 'to' date")

    return DateRange(start=start, end=end)


def flatten_calendar(
    calendar: ContributionCalendar, newest_first: bool = True
) -> list[ContributionDay]:
    """Concatenate the days of every week, optionally newest first."""

    days = [day for week in calendar.weeks for day in week.days]
    if newest_first:
        days.reverse()
    return days


def get_authenticated_login(client: httpx.Client) -> str:
    """Resolve the login of the user the client is authenticated as."""

    try:
        github_user = fetch_authenticated_user(client)
    except httpx.HTTPStatusError as exc:
        raise AuthError(
            f"error from github api: {exc.response.status_code} "
            f"{exc.response.reason_phrase}"
        ) from exc
    except (httpx.HTTPError, ValueError) as exc:
        raise AuthError(f"error from github api: {exc}") from exc

    logger.debug("authenticated as %s", github_user["login"])
    return github_user["login"]


def get_contribution_calendar(
    client: httpx.Client,
    graphql_url: str,
    username: str,
    date_range: DateRange | None = None,
) -> ContributionCalendar:
    """Fetch the contribution calendar of `username`.

    Without a range GitHub applies its own default window.
    """

    variables = build_query_variables(
        username,
        from_day=date_range.start if date_range else None,
        to_day=date_range.end if date_range else None,
    )
    logger.debug("querying contributions with %s", variables)

    try:
        raw_calendar = fetch_contribution_calendar(client, graphql_url, variables)
        return ContributionCalendar.model_validate(raw_calendar)
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            f"error from github api: {exc.response.status_code} "
            f"{exc.response.reason_phrase}"
        ) from exc
    except (httpx.HTTPError, ValidationError, ValueError) as exc:
        raise FetchError(f"error from github api: {exc}") from exc
