"""Thin wrapper around the `gh` CLI for GitHub REST and GraphQL calls."""

import json
import logging
import os
import subprocess
from typing import Any

logger = logging.getLogger(__name__)

GH_TIMEOUT_SECONDS = 60


class GitHubError(Exception):
    """A `gh` invocation failed or returned something unparseable."""

    pass


def run_gh(args: list[str], token: str | None = None, timeout: int = GH_TIMEOUT_SECONDS) -> Any:
    """Run `gh` with the given arguments and return its parsed JSON output.

    Raises:
        GitHubError: If gh is missing, times out, exits non-zero, or prints invalid JSON.
    """
    env = None
    if token:
        env = {**os.environ, "GH_TOKEN": token}

    try:
        result = subprocess.run(
            ["gh", *args],
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        raise GitHubError(f"gh {args[:2]} failed: {e}") from e

    if result.returncode != 0:
        raise GitHubError(f"gh {args[:2]} exited {result.returncode}: {result.stderr.strip()}")

    if not result.stdout.strip():
        return None
    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise GitHubError(f"gh {args[:2]} returned invalid JSON: {e}") from e


def gh_api(path: str, params: dict[str, str | int] | None = None, token: str | None = None) -> Any:
    """GET a REST endpoint; params become the query string."""
    args = ["api", "-X", "GET", path, "-H", "Accept: application/vnd.github+json"]
    for key, value in (params or {}).items():
        args.extend(["-f", f"{key}={value}"])
    logger.debug("gh api %s %s", path, params or {})
    return run_gh(args, token=token)


def gh_graphql(
    query: str, variables: dict[str, str] | None = None, token: str | None = None
) -> Any:
    """Run a GraphQL query and return its `data` object."""
    args = ["api", "graphql", "-f", f"query={query}"]
    for key, value in (variables or {}).items():
        args.extend(["-f", f"{key}={value}"])
    response = run_gh(args, token=token)
    if not isinstance(response, dict) or "data" not in response:
        raise GitHubError(f"unexpected GraphQL response: {response!r}")
    return response["data"]
