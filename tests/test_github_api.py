import json
from datetime import date

import httpx
import pytest

from gh_contrib.github_api import CONTRIBUTIONS_QUERY
from gh_contrib.github_api import build_query_variables
from gh_contrib.github_api import fetch_authenticated_user
from gh_contrib.github_api import fetch_contribution_calendar
from gh_contrib.github_api import fetch_latest_release_tag

GRAPHQL_URL = "https://api.github.com/graphql"


def make_client(handler) -> httpx.Client:
    return httpx.Client(
        base_url="https://api.github.com", transport=httpx.MockTransport(handler)
    )


def test_query_variables_include_both_bounds() -> None:
    variables = build_query_variables("octocat", date(2024, 1, 1), date(2024, 1, 6))

    assert variables == {
        "userName": "octocat",
        "from": "2024-01-01T00:00:00Z",
        "to": "2024-01-06T00:00:00Z",
    }


def test_query_variables_omit_absent_bounds() -> None:
    assert build_query_variables("octocat") == {"userName": "octocat"}
    assert build_query_variables("octocat", to_day=date(2024, 1, 6)) == {
        "userName": "octocat",
        "to": "2024-01-06T00:00:00Z",
    }
    assert build_query_variables("octocat", from_day=date(2024, 1, 1)) == {
        "userName": "octocat",
        "from": "2024-01-01T00:00:00Z",
    }


def test_query_variables_never_hold_empty_values() -> None:
    variables = build_query_variables("octocat", None, date(2024, 1, 6))

    assert all(value for value in variables.values())


def test_query_variables_require_username() -> None:
    with pytest.raises(ValueError):
        build_query_variables("")


def test_fetch_authenticated_user_returns_login() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/user"
        return httpx.Response(200, json={"login": "octocat", "id": 1})

    with make_client(handler) as client:
        assert fetch_authenticated_user(client) == {"login": "octocat"}


def test_fetch_authenticated_user_rejects_missing_login() -> None:
    with make_client(lambda request: httpx.Response(200, json={"id": 1})) as client:
        with pytest.raises(ValueError, match="missing required fields"):
            fetch_authenticated_user(client)


def test_fetch_authenticated_user_raises_on_401() -> None:
    with make_client(lambda request: httpx.Response(401)) as client:
        with pytest.raises(httpx.HTTPStatusError):
            fetch_authenticated_user(client)


def test_fetch_contribution_calendar_posts_query_and_variables() -> None:
    calendar = {"totalContributions": 0, "weeks": []}
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={
                "data": {
                    "user": {"contributionsCollection": {"contributionCalendar": calendar}}
                }
            },
        )

    with make_client(handler) as client:
        result = fetch_contribution_calendar(
            client, GRAPHQL_URL, {"userName": "octocat"}
        )

    assert result == calendar
    assert seen == [{"query": CONTRIBUTIONS_QUERY, "variables": {"userName": "octocat"}}]


def test_fetch_contribution_calendar_surfaces_graphql_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"data": None, "errors": [{"message": "Could not resolve to a User"}]},
        )

    with make_client(handler) as client:
        with pytest.raises(ValueError, match="Could not resolve to a User"):
            fetch_contribution_calendar(client, GRAPHQL_URL, {"userName": "ghost"})


def test_fetch_contribution_calendar_requires_user_node() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"user": None}})

    with make_client(handler) as client:
        with pytest.raises(ValueError, match="GitHub user not found"):
            fetch_contribution_calendar(client, GRAPHQL_URL, {"userName": "ghost"})


def test_fetch_latest_release_tag() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/repos/octo/gh-contrib/releases/latest"
        return httpx.Response(200, json={"tag_name": "v1.2.0"})

    with make_client(handler) as client:
        assert fetch_latest_release_tag(client, "octo/gh-contrib") == "v1.2.0"


def test_fetch_latest_release_tag_without_releases() -> None:
    with make_client(lambda request: httpx.Response(404)) as client:
        assert fetch_latest_release_tag(client, "octo/gh-contrib") is None
