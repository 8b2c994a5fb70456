"""Tests for the prompts module."""

import logging
from unittest.mock import MagicMock

import pytest

from github_weekly_report.prompts import PromptManager, compile_prompt, get_prompt


class TestPromptManager:
    """Tests for the PromptManager class."""

    def test_singleton(self) -> None:
        """PromptManager returns the same instance."""
        assert PromptManager() is PromptManager()

    def test_get_all_templates(self) -> None:
        """All templates used by the pipeline load without error."""
        names = [
            "source-system",
            "source-summarize",
            "source-refine",
            "commits-guidance",
            "issues-guidance",
            "discussions-guidance",
            "correlate-system",
            "correlate-summarize",
            "correlate-refine",
        ]
        for name in names:
            assert get_prompt(name).strip(), f"Template '{name}' is empty"

    def test_get_missing_template_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            get_prompt("nonexistent-template")

    def test_get_missing_template_with_fallback(self) -> None:
        assert get_prompt("nonexistent-template", fallback="default text") == "default text"

    @pytest.mark.parametrize("name", ["invalid name with spaces", "bad/name", "../etc"])
    def test_invalid_name_raises(self, name: str) -> None:
        with pytest.raises(ValueError, match="Invalid prompt name"):
            get_prompt(name)

    def test_caching(self) -> None:
        """Second load uses cache."""
        manager = PromptManager()
        assert manager.get("source-system") is manager.get("source-system")

    def test_clear_cache(self) -> None:
        manager = PromptManager()
        first = manager.get("source-system")
        manager.clear_cache()
        second = manager.get("source-system")
        assert first == second
        assert first is not second

    def test_compile_multiple_vars(self) -> None:
        result = PromptManager().compile("{{a}} and {{b}}", {"a": "X", "b": "Y"})
        assert result == "X and Y"

    def test_compile_missing_var_left_as_is(self) -> None:
        assert PromptManager().compile("Hello {{name}}", {}) == "Hello {{name}}"

    def test_compile_missing_var_is_logged(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            PromptManager().compile("{{owner}}/{{repo}}", {"owner": "acme"})
        assert "unfilled: repo" in caplog.text

    def test_braces_in_values_are_not_reported(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            result = PromptManager().compile(
                "Issue body: {{activity}}", {"activity": "uses {{ matrix.os }} and {{x}}"}
            )
        assert result == "Issue body: uses {{ matrix.os }} and {{x}}"
        assert "unfilled" not in caplog.text

    def test_posthog_prompt_preferred_when_configured(self, monkeypatch) -> None:
        remote = MagicMock()
        remote.get.return_value = "remote {{owner}}"
        manager = PromptManager()
        manager._posthog_prompts = remote
        manager._posthog_init_attempted = True

        assert manager.get_compiled("source-system", {"owner": "acme"}) == "remote acme"

    def test_posthog_failure_falls_back_to_local(self) -> None:
        remote = MagicMock()
        remote.get.side_effect = RuntimeError("unreachable")
        manager = PromptManager()
        manager._posthog_prompts = remote
        manager._posthog_init_attempted = True

        assert "reviewing" in manager.get("source-system")


class TestTemplates:
    """The pipeline's templates compile with the variables it passes."""

    def test_source_system(self) -> None:
        result = compile_prompt(
            "source-system",
            {
                "addressee": "alice's",
                "owner": "acme",
                "repo": "widget",
                "source": "commits",
                "days": "7",
                "guidance": get_prompt("commits-guidance"),
            },
        )
        assert "alice's recent work" in result
        assert "`acme/widget`" in result
        assert "7 day(s)" in result
        assert "code changes" in result
        assert "{{" not in result

    def test_source_summarize(self) -> None:
        result = compile_prompt(
            "source-summarize",
            {"profile": "About acme/widget.", "source": "issues", "activity": "Issue #1"},
        )
        assert "About acme/widget." in result
        assert "Issue #1" in result
        assert "{{" not in result

    def test_source_refine(self) -> None:
        result = compile_prompt("source-refine", {"max_words": "256"})
        assert "at most 256 words" in result

    def test_correlate_system(self) -> None:
        result = compile_prompt(
            "correlate-system",
            {
                "addressee": "key community participants'",
                "owner": "acme",
                "repo": "widget",
                "days": "7",
            },
        )
        assert "key community participants' contributions" in result
        assert "{{" not in result

    def test_correlate_summarize(self) -> None:
        result = compile_prompt(
            "correlate-summarize",
            {
                "profile": "About acme/widget.",
                "commits": "C",
                "issues": "I",
                "discussions": "D",
            },
        )
        assert "Commits summary:\nC" in result
        assert "Issues summary:\nI" in result
        assert "Discussions summary:\nD" in result
