import logging
import re
import shutil
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

import httpx
from rich.console import Console

from gh_contrib.github_api import fetch_latest_release_tag

logger = logging.getLogger(__name__)

_COMMIT_SHA = re.compile(r"[0-9a-f]{7,40}")


@dataclass(frozen=True)
class Extension:
    name: str
    current_version: str
    latest_version: str


class ExtensionRegistry(Protocol):
    def list(self, name: str | None = None) -> Iterable[Extension]: ...


class GhExtensionRegistry:
    """Installed `gh` extensions, with latest versions from GitHub releases."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    @staticmethod
    def _installed() -> list[tuple[str, str, str]]:
        gh_path = shutil.which("gh")
        if gh_path is None:
            return []

        try:
            result = subprocess.run(
                [gh_path, "extension", "list"],
                capture_output=True,
                text=True,
                check=True,
                timeout=10,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("gh extension list failed: %s", exc)
            return []

        return parse_extension_list(result.stdout)

    def list(self, name: str | None = None) -> list[Extension]:
        extensions: list[Extension] = []
        for ext_name, repo, current in self._installed():
            if name is not None and ext_name != name:
                continue
            if is_commit_sha(current):
                logger.debug("%s is pinned to commit %s, skipping", ext_name, current)
                continue
            try:
                latest = fetch_latest_release_tag(self.client, repo)
            except (httpx.HTTPError, ValueError) as exc:
                logger.debug("latest release lookup failed for %s: %s", repo, exc)
                continue
            if latest is None:
                continue
            extensions.append(
                Extension(name=ext_name, current_version=current, latest_version=latest)
            )
        return extensions


def is_commit_sha(version: str) -> bool:
    """Git-installed extensions report a commit instead of a release tag."""

    return _COMMIT_SHA.fullmatch(version) is not None


def parse_extension_list(output: str) -> list[tuple[str, str, str]]:
    """Parse tab separated `gh extension list` rows into (name, repo, version)."""

    rows: list[tuple[str, str, str]] = []
    for line in output.splitlines():
        fields = [field.strip() for field in line.split("\t")]
        if len(fields) < 3 or not all(fields[:3]):
            continue
        display_name, repo, version = fields[:3]
        rows.append((display_name.removeprefix("gh "), repo, version))
    return rows


def check_version(
    registry: ExtensionRegistry, console: Console, name: str = "contrib"
) -> None:
    """Warn on `console` when the named extension is behind its latest release."""

    try:
        extensions = list(registry.list(name))
    except Exception as exc:
        logger.debug("extension registry lookup failed: %s", exc)
        return

    match = next((ext for ext in extensions if ext.name == name), None)
    if match is None:
        return

    if match.current_version != match.latest_version:
        console.print(
            f"your {name} extension is out of date: "
            f"{match.current_version} -> {match.latest_version}",
            style="white",
            markup=False,
        )
        console.print(
            f"run `gh extension upgrade {name}` to update",
            style="white",
            markup=False,
        )
