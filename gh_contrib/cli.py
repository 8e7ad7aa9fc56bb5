import argparse
import logging
import sys
from collections.abc import Sequence
from datetime import date

import sentry_sdk
from rich.console import Console

from gh_contrib.core.auth import build_client
from gh_contrib.core.auth import resolve_token
from gh_contrib.core.observability import configure_logging
from gh_contrib.core.observability import init_sentry
from gh_contrib.core.rendering import render_contributions
from gh_contrib.core.rendering import render_error
from gh_contrib.services.contribution_service import ContribError
from gh_contrib.services.contribution_service import flatten_calendar
from gh_contrib.services.contribution_service import get_authenticated_login
from gh_contrib.services.contribution_service import get_contribution_calendar
from gh_contrib.services.contribution_service import resolve_date_range
from gh_contrib.services.version_service import GhExtensionRegistry
from gh_contrib.services.version_service import check_version
from gh_contrib.settings import Settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gh-contrib",
        description="Show your GitHub contributions for a date range.",
    )
    parser.add_argument(
        "-from",
        "--from",
        dest="from_date",
        metavar="YYYY-MM-DD",
        help="from date (YYYY-MM-DD) defaults to 5 days ago",
    )
    parser.add_argument(
        "-to",
        "--to",
        dest="to_date",
        metavar="YYYY-MM-DD",
        help="to date (YYYY-MM-DD) defaults to today",
    )
    parser.add_argument(
        "--no-version-check",
        dest="version_check",
        action="store_false",
        help="skip the extension update advisory",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log debug output to stderr"
    )
    return parser


def run(
    args: argparse.Namespace,
    settings: Settings,
    console: Console,
    today: date | None = None,
) -> None:
    date_range = resolve_date_range(args.from_date, args.to_date, today=today)
    token = resolve_token(settings)

    with build_client(settings, token) as client:
        login = get_authenticated_login(client)
        calendar = get_contribution_calendar(
            client, settings.github_graphql_url, login, date_range
        )
        render_contributions(console, flatten_calendar(calendar), calendar.total)

        if args.version_check:
            check_version(
                GhExtensionRegistry(client), console, name=settings.extension_name
            )


def main(
    argv: Sequence[str] | None = None,
    settings: Settings | None = None,
    console: Console | None = None,
    err_console: Console | None = None,
    today: date | None = None,
) -> int:
    """Run the CLI and return the process exit code."""

    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    console = console or Console()
    err_console = err_console or Console(stderr=True)

    try:
        settings = settings or Settings()
        init_sentry(settings)
        run(args, settings, console, today=today)
    except ContribError as exc:
        render_error(err_console, str(exc))
        return 1
    except KeyboardInterrupt:
        render_error(err_console, "interrupted")
        return 130
    except Exception as exc:
        logger.debug("unexpected failure", exc_info=True)
        sentry_sdk.capture_exception(exc)
        render_error(err_console, f"unexpected error: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
