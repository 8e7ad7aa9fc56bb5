import logging
import shutil
import subprocess

import httpx

from gh_contrib.services.contribution_service import AuthError
from gh_contrib.settings import Settings

logger = logging.getLogger(__name__)

USER_AGENT = "gh-contrib"


def token_from_gh_cli() -> str | None:
    """Read the token of the active `gh` session, if the CLI is available."""

    gh_path = shutil.which("gh")
    if gh_path is None:
        return None

    try:
        result = subprocess.run(
            [gh_path, "auth", "token"],
            capture_output=True,
            text=True,
            check=True,
            timeout=10,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("gh auth token failed: %s", exc)
        return None

    return result.stdout.strip() or None


def resolve_token(settings: Settings) -> str:
    """Pick the configured token, falling back to the gh CLI session.

    Raises:
        AuthError: If no token is available from either source.
    """

    if settings.github_token and settings.github_token.strip():
        return settings.github_token.strip()

    token = token_from_gh_cli()
    if token:
        return token

    raise AuthError("no GitHub token found; run `gh auth login` or set GH_TOKEN")


def build_client(settings: Settings, token: str) -> httpx.Client:
    """Create the authenticated HTTP client shared by all GitHub calls."""

    return httpx.Client(
        base_url=settings.github_api_url,
        headers={
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        },
        timeout=settings.http_timeout,
    )
