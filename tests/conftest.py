"""Shared fixtures."""

import pytest

from github_weekly_report.config import ReportConfig
from github_weekly_report.context import ReportContext
from github_weekly_report.prompts import PromptManager


@pytest.fixture(autouse=True)
def _clear_prompt_cache(monkeypatch) -> None:
    """Use local templates only, with a fresh cache per test."""
    monkeypatch.delenv("POSTHOG_PERSONAL_API_KEY", raising=False)
    PromptManager().clear_cache()


@pytest.fixture
def config(tmp_path) -> ReportConfig:
    return ReportConfig(_env_file=None, data_dir=tmp_path)


@pytest.fixture
def make_ctx(config):
    def _make(user_name: str | None = "alice", window_days: int = 7) -> ReportContext:
        return ReportContext(
            config=config,
            owner="acme",
            repo="widget",
            user_name=user_name,
            window_days=window_days,
        )

    return _make
