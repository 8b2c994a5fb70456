"""Repository lookups: profile text and code contributors."""

import asyncio
import logging
from typing import Any

from github_weekly_report.tools.github.gh_cli import GitHubError, gh_api

logger = logging.getLogger(__name__)


def format_profile(owner: str, repo: str, data: dict[str, Any]) -> str:
    parts = [data.get("description") or "No description."]
    if data.get("language"):
        parts.append(f"Language: {data['language']}.")
    parts.append(f"Stars: {data.get('stargazers_count', 0)}.")
    topics = data.get("topics") or []
    if topics:
        parts.append(f"Topics: {', '.join(topics)}.")
    return f"About {owner}/{repo}: {' '.join(parts)}"


class GitHubRepositories:
    """Looks up public repositories through `gh api`."""

    def __init__(self, token: str | None = None):
        self.token = token

    def _profile(self, owner: str, repo: str) -> str | None:
        try:
            data = gh_api(f"repos/{owner}/{repo}", token=self.token)
        except GitHubError as e:
            logger.info("repository %s/%s not available: %s", owner, repo, e)
            return None
        if not isinstance(data, dict) or data.get("private"):
            return None
        return format_profile(owner, repo, data)

    def _contributors(self, owner: str, repo: str) -> set[str]:
        try:
            data = gh_api(
                f"repos/{owner}/{repo}/contributors", {"per_page": 100}, token=self.token
            )
        except GitHubError as e:
            logger.error("failed to get contributors of %s/%s: %s", owner, repo, e)
            return set()
        return {c["login"].lower() for c in data or [] if c.get("login")}

    async def get_profile(self, owner: str, repo: str) -> str | None:
        """Profile text for a public repository, or None if it is missing or private."""
        return await asyncio.to_thread(self._profile, owner, repo)

    async def is_code_contributor(self, owner: str, repo: str, user: str) -> bool:
        contributors = await asyncio.to_thread(self._contributors, owner, repo)
        return user.lower() in contributors
