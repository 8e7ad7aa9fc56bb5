from collections.abc import Mapping
from datetime import date
from typing import Any

import httpx

CONTRIBUTIONS_QUERY = """
query($userName: String!, $from: DateTime, $to: DateTime) {
  user(login: $userName) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            contributionCount
            contributionLevel
            date
          }
        }
      }
    }
  }
}
"""


def fetch_authenticated_user(client: httpx.Client) -> dict[str, str]:
    """Fetch the login of the token owner from GitHub REST API."""

    response = client.get("user")
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise ValueError("GitHub user response is invalid")

    raw_login = payload.get("login")
    if not isinstance(raw_login, str) or not raw_login:
        raise ValueError("GitHub user response is missing required fields")

    return {"login": raw_login}


def format_graphql_datetime(day: date) -> str:
    """Render a day as an RFC 3339 timestamp at UTC midnight."""

    return f"{day.isoformat()}T00:00:00Z"


def build_query_variables(
    username: str,
    from_day: date | None = None,
    to_day: date | None = None,
) -> dict[str, str]:
    """Build GraphQL variables, leaving out bounds GitHub should default."""

    if not username:
        raise ValueError("username is required")

    variables = {"userName": username}
    if from_day is not None:
        variables["from"] = format_graphql_datetime(from_day)
    if to_day is not None:
        variables["to"] = format_graphql_datetime(to_day)
    return variables


def fetch_contribution_calendar(
    client: httpx.Client,
    graphql_url: str,
    variables: Mapping[str, str],
) -> Mapping[str, Any]:
    """Run the contribution query and return the raw calendar node."""

    response = client.post(
        graphql_url,
        json={"query": CONTRIBUTIONS_QUERY, "variables": dict(variables)},
    )
    response.raise_for_status()

    payload = response.json()
    if not isinstance(payload, Mapping):
        raise ValueError("GitHub GraphQL response is invalid")

    errors = payload.get("errors")
    if errors:
        messages = [
            str(error.get("message"))
            for error in errors
            if isinstance(error, Mapping) and error.get("message")
        ]
        raise ValueError(
            "GitHub GraphQL returned errors: " + "; ".join(messages or ["unknown"])
        )

    data = payload.get("data")
    if not isinstance(data, Mapping):
        raise ValueError("GitHub GraphQL data is missing")

    user = data.get("user")
    if not isinstance(user, Mapping):
        raise ValueError("GitHub user not found")

    collection = user.get("contributionsCollection")
    if not isinstance(collection, Mapping):
        raise ValueError("GitHub contributionsCollection is missing")

    calendar = collection.get("contributionCalendar")
    if not isinstance(calendar, Mapping):
        raise ValueError("GitHub contributionCalendar is missing")

    return calendar


def fetch_latest_release_tag(client: httpx.Client, repo: str) -> str | None:
    """Return the newest release tag of `owner/name`, or None without releases."""

    response = client.get(f"repos/{repo}/releases/latest")
    if response.status_code == 404:
        return None
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise ValueError("GitHub release response is invalid")

    tag = payload.get("tag_name")
    if not isinstance(tag, str) or not tag:
        return None
    return tag
