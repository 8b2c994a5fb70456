"""GitHub CLI tools for data gathering."""

from github_weekly_report.tools.github.activity import (
    CommitsFetcher,
    DiscussionsFetcher,
    IssuesFetcher,
    create_fetchers,
)
from github_weekly_report.tools.github.gh_cli import GitHubError, gh_api, gh_graphql
from github_weekly_report.tools.github.repository import GitHubRepositories

__all__ = [
    # Activity fetchers
    "CommitsFetcher",
    "IssuesFetcher",
    "DiscussionsFetcher",
    "create_fetchers",
    # Repository lookups
    "GitHubRepositories",
    # Low-level
    "GitHubError",
    "gh_api",
    "gh_graphql",
]
