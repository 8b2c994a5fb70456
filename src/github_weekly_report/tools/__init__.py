"""Collaborators of the report pipeline: GitHub, Slack, status sinks and storage."""

from github_weekly_report.tools.github import (
    GitHubRepositories,
    create_fetchers,
)
from github_weekly_report.tools.status import (
    ConsoleStatusSink,
    NullStatusSink,
    SlackStatusSink,
    StatusSink,
    post_status,
)
from github_weekly_report.tools.user_store import SqliteUserStore

__all__ = [
    # GitHub tools
    "GitHubRepositories",
    "create_fetchers",
    # Status sinks
    "StatusSink",
    "ConsoleStatusSink",
    "SlackStatusSink",
    "NullStatusSink",
    "post_status",
    # Storage
    "SqliteUserStore",
]
