"""Fetchers for commits, issues and discussions in a time window."""

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from github_weekly_report.models import ActivityItem, DataSource, FetchResult
from github_weekly_report.tools.github.gh_cli import GitHubError, gh_api, gh_graphql

logger = logging.getLogger(__name__)

MAX_ITEMS = 50
MAX_COMMENTS = 30

DISCUSSIONS_QUERY = """
query($searchQuery: String!) {
  search(query: $searchQuery, type: DISCUSSION, first: 20) {
    nodes {
      ... on Discussion {
        number
        title
        url
        body
        author { login }
        comments(first: 30) {
          nodes { author { login } body }
        }
      }
    }
  }
}
"""


def _since(window_days: int) -> datetime:
    return datetime.now(UTC) - timedelta(days=window_days)


def _iso(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def _login(node: dict[str, Any] | None) -> str:
    return (node or {}).get("login") or "ghost"


class GhActivityFetcher:
    """Base fetcher: runs the blocking `gh` calls in a worker thread.

    A GitHubError is logged and reported as None so the pipeline can tell a
    failed fetch from an empty one.
    """

    source: DataSource

    def __init__(self, token: str | None = None):
        self.token = token

    def fetch_items(
        self, owner: str, repo: str, user: str | None, since: datetime
    ) -> list[ActivityItem]:
        raise NotImplementedError

    async def fetch(
        self,
        owner: str,
        repo: str,
        user: str | None,
        window_days: int,
    ) -> FetchResult | None:
        try:
            items = await asyncio.to_thread(
                self.fetch_items, owner, repo, user, _since(window_days)
            )
        except GitHubError as e:
            logger.error("fetching %s for %s/%s failed: %s", self.source.value, owner, repo, e)
            return None
        return FetchResult.of(items)


class CommitsFetcher(GhActivityFetcher):
    source = DataSource.COMMITS

    def fetch_items(
        self, owner: str, repo: str, user: str | None, since: datetime
    ) -> list[ActivityItem]:
        params: dict[str, str | int] = {"since": _iso(since), "per_page": MAX_ITEMS}
        if user:
            params["author"] = user
        commits = gh_api(f"repos/{owner}/{repo}/commits", params, token=self.token) or []

        items = []
        for commit in commits:
            detail = commit.get("commit", {})
            author = commit.get("author") or {}
            name = author.get("login") or detail.get("author", {}).get("name", "unknown")
            date = detail.get("author", {}).get("date", "")
            body = f"commit {commit['sha'][:7]} by {name} on {date}\n{detail.get('message', '')}"
            items.append(ActivityItem(source_url=commit["html_url"], body=body))
        return items


class IssuesFetcher(GhActivityFetcher):
    source = DataSource.ISSUES

    def _comments(self, owner: str, repo: str, number: int) -> list[str]:
        comments = gh_api(
            f"repos/{owner}/{repo}/issues/{number}/comments",
            {"per_page": MAX_COMMENTS},
            token=self.token,
        )
        return [f"{_login(c.get('user'))}: {c.get('body') or ''}" for c in comments or []]

    def fetch_items(
        self, owner: str, repo: str, user: str | None, since: datetime
    ) -> list[ActivityItem]:
        query = f"repo:{owner}/{repo} is:issue updated:>{_iso(since)}"
        if user:
            query += f" involves:{user}"
        found = gh_api("search/issues", {"q": query, "per_page": MAX_ITEMS}, token=self.token)

        items = []
        for issue in (found or {}).get("items", []):
            lines = [
                f"Issue #{issue['number']}: {issue['title']} [{issue.get('state', 'unknown')}]"
                f" by {_login(issue.get('user'))}",
                issue.get("body") or "",
            ]
            if issue.get("comments"):
                lines.extend(self._comments(owner, repo, issue["number"]))
            items.append(ActivityItem(source_url=issue["html_url"], body="\n".join(lines)))
        return items


class DiscussionsFetcher(GhActivityFetcher):
    source = DataSource.DISCUSSIONS

    def fetch_items(
        self, owner: str, repo: str, user: str | None, since: datetime
    ) -> list[ActivityItem]:
        search_query = f"repo:{owner}/{repo} updated:>{_iso(since)}"
        if user:
            search_query += f" involves:{user}"
        data = gh_graphql(DISCUSSIONS_QUERY, {"searchQuery": search_query}, token=self.token)

        items = []
        for node in data.get("search", {}).get("nodes", []):
            if not node.get("url"):
                continue
            lines = [
                f"Discussion #{node['number']}: {node['title']} by {_login(node.get('author'))}",
                node.get("body") or "",
            ]
            for comment in node.get("comments", {}).get("nodes", []):
                lines.append(f"{_login(comment.get('author'))}: {comment.get('body') or ''}")
            items.append(ActivityItem(source_url=node["url"], body="\n".join(lines)))
        return items


def create_fetchers(token: str | None = None) -> dict[DataSource, GhActivityFetcher]:
    """One fetcher per data source, sharing the same credentials."""
    fetchers: list[GhActivityFetcher] = [
        CommitsFetcher(token),
        IssuesFetcher(token),
        DiscussionsFetcher(token),
    ]
    return {fetcher.source: fetcher for fetcher in fetchers}
