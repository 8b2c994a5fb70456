"""Tests for the `gh` CLI wrapper and the GitHub fetchers."""

import asyncio
import subprocess
from unittest.mock import MagicMock

import pytest

from github_weekly_report.models import DataSource
from github_weekly_report.tools.github import (
    CommitsFetcher,
    DiscussionsFetcher,
    GitHubError,
    GitHubRepositories,
    IssuesFetcher,
    create_fetchers,
)
from github_weekly_report.tools.github.gh_cli import gh_api, run_gh
from github_weekly_report.tools.github.repository import format_profile

ACTIVITY = "github_weekly_report.tools.github.activity"


def completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> MagicMock:
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestRunGh:
    def test_parses_json(self, monkeypatch):
        run = MagicMock(return_value=completed('{"login": "alice"}'))
        monkeypatch.setattr(subprocess, "run", run)

        assert run_gh(["api", "user"]) == {"login": "alice"}
        assert run.call_args[0][0] == ["gh", "api", "user"]
        assert run.call_args[1]["env"] is None

    def test_token_is_passed_in_env(self, monkeypatch):
        run = MagicMock(return_value=completed("[]"))
        monkeypatch.setattr(subprocess, "run", run)

        run_gh(["api", "user"], token="ghp_secret")

        assert run.call_args[1]["env"]["GH_TOKEN"] == "ghp_secret"

    def test_nonzero_exit_raises(self, monkeypatch):
        monkeypatch.setattr(
            subprocess, "run", MagicMock(return_value=completed(returncode=1, stderr="Not Found"))
        )
        with pytest.raises(GitHubError, match="Not Found"):
            run_gh(["api", "repos/acme/nope"])

    def test_missing_gh_raises(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", MagicMock(side_effect=FileNotFoundError("gh")))
        with pytest.raises(GitHubError):
            run_gh(["api", "user"])

    def test_timeout_raises(self, monkeypatch):
        monkeypatch.setattr(
            subprocess, "run", MagicMock(side_effect=subprocess.TimeoutExpired("gh", 60))
        )
        with pytest.raises(GitHubError):
            run_gh(["api", "user"])

    def test_invalid_json_raises(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", MagicMock(return_value=completed("not json")))
        with pytest.raises(GitHubError, match="invalid JSON"):
            run_gh(["api", "user"])

    def test_empty_output_is_none(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", MagicMock(return_value=completed("  \n")))
        assert run_gh(["api", "user"]) is None

    def test_gh_api_builds_query_fields(self, monkeypatch):
        run = MagicMock(return_value=completed("[]"))
        monkeypatch.setattr(subprocess, "run", run)

        gh_api("repos/acme/widget/commits", {"since": "2026-10-12T00:00:00Z", "per_page": 50})

        args = run.call_args[0][0]
        assert args[:5] == ["gh", "api", "-X", "GET", "repos/acme/widget/commits"]
        assert "since=2026-10-12T00:00:00Z" in args
        assert "per_page=50" in args


class TestCommitsFetcher:
    def test_builds_items(self, monkeypatch):
        calls = []

        def fake_api(path, params=None, token=None):
            calls.append((path, params))
            return [
                {
                    "sha": "0123456789abcdef",
                    "html_url": "https://github.com/acme/widget/commit/0123456789abcdef",
                    "author": {"login": "alice"},
                    "commit": {
                        "message": "Fix widget alignment",
                        "author": {"name": "Alice", "date": "2026-10-15T10:00:00Z"},
                    },
                }
            ]

        monkeypatch.setattr(f"{ACTIVITY}.gh_api", fake_api)

        result = asyncio.run(CommitsFetcher().fetch("acme", "widget", "alice", 7))

        assert result.count == 1
        item = result.items[0]
        assert item.short_id(7) == "0123456"
        assert "Fix widget alignment" in item.body
        assert "by alice" in item.body
        assert calls[0][0] == "repos/acme/widget/commits"
        assert calls[0][1]["author"] == "alice"

    def test_without_user_has_no_author_filter(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            f"{ACTIVITY}.gh_api",
            lambda path, params=None, token=None: calls.append(params) or [],
        )

        result = asyncio.run(CommitsFetcher().fetch("acme", "widget", None, 7))

        assert result.count == 0
        assert "author" not in calls[0]

    def test_failure_is_none(self, monkeypatch):
        def boom(path, params=None, token=None):
            raise GitHubError("rate limited")

        monkeypatch.setattr(f"{ACTIVITY}.gh_api", boom)

        assert asyncio.run(CommitsFetcher().fetch("acme", "widget", "alice", 7)) is None


class TestIssuesFetcher:
    def test_appends_comments(self, monkeypatch):
        def fake_api(path, params=None, token=None):
            if path == "search/issues":
                assert "repo:acme/widget is:issue" in params["q"]
                assert "involves:alice" in params["q"]
                return {
                    "items": [
                        {
                            "number": 12,
                            "title": "Widget crashes",
                            "state": "open",
                            "html_url": "https://github.com/acme/widget/issues/12",
                            "user": {"login": "bob"},
                            "body": "It crashes on start.",
                            "comments": 1,
                        }
                    ]
                }
            assert path == "repos/acme/widget/issues/12/comments"
            return [{"user": {"login": "alice"}, "body": "Fixed in main."}]

        monkeypatch.setattr(f"{ACTIVITY}.gh_api", fake_api)

        result = asyncio.run(IssuesFetcher().fetch("acme", "widget", "alice", 7))

        item = result.items[0]
        assert item.short_id() == "12"
        assert "Issue #12: Widget crashes [open] by bob" in item.body
        assert "alice: Fixed in main." in item.body


class TestDiscussionsFetcher:
    def test_builds_items(self, monkeypatch):
        def fake_graphql(query, variables=None, token=None):
            assert "involves:alice" in variables["searchQuery"]
            return {
                "search": {
                    "nodes": [
                        {
                            "number": 5,
                            "title": "Roadmap",
                            "url": "https://github.com/acme/widget/discussions/5",
                            "body": "What next?",
                            "author": {"login": "carol"},
                            "comments": {"nodes": [{"author": None, "body": "v2!"}]},
                        },
                        {},
                    ]
                }
            }

        monkeypatch.setattr(f"{ACTIVITY}.gh_graphql", fake_graphql)

        result = asyncio.run(DiscussionsFetcher().fetch("acme", "widget", "alice", 7))

        assert result.count == 1
        assert result.items[0].short_id() == "5"
        assert "ghost: v2!" in result.items[0].body


class TestCreateFetchers:
    def test_one_per_source(self):
        fetchers = create_fetchers("token")
        assert set(fetchers) == set(DataSource)
        assert all(f.token == "token" for f in fetchers.values())


class TestRepositories:
    def test_format_profile(self):
        profile = format_profile(
            "acme",
            "widget",
            {
                "description": "Widgets for everyone.",
                "language": "Python",
                "stargazers_count": 42,
                "topics": ["ui", "widgets"],
            },
        )
        assert profile == (
            "About acme/widget: Widgets for everyone. Language: Python. Stars: 42. "
            "Topics: ui, widgets."
        )

    def test_private_repo_is_invalid(self, monkeypatch):
        monkeypatch.setattr(
            "github_weekly_report.tools.github.repository.gh_api",
            lambda path, params=None, token=None: {"private": True},
        )
        assert asyncio.run(GitHubRepositories().get_profile("acme", "secret")) is None

    def test_missing_repo_is_invalid(self, monkeypatch):
        def boom(path, params=None, token=None):
            raise GitHubError("Not Found")

        monkeypatch.setattr("github_weekly_report.tools.github.repository.gh_api", boom)
        assert asyncio.run(GitHubRepositories().get_profile("acme", "nope")) is None

    def test_contributor_check_is_case_insensitive(self, monkeypatch):
        monkeypatch.setattr(
            "github_weekly_report.tools.github.repository.gh_api",
            lambda path, params=None, token=None: [{"login": "Alice"}, {"login": "bob"}],
        )
        repos = GitHubRepositories()
        assert asyncio.run(repos.is_code_contributor("acme", "widget", "alice"))
        assert not asyncio.run(repos.is_code_contributor("acme", "widget", "mallory"))
