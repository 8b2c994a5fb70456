"""Centralized prompt management for the report pipeline.

Loads prompt templates from .md files and compiles them with {{variable}} substitution.
When POSTHOG_PERSONAL_API_KEY is set, fetches prompts from PostHog prompt management
with local .md files as fallbacks.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

# PostHog-compatible name pattern
_VALID_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
_PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


class PromptManager:
    """Manages loading and compiling prompt templates.

    Templates are .md files in the templates/ directory with {{variable}} placeholders.
    """

    _instance: "PromptManager | None" = None
    _cache: dict[str, str]
    _posthog_prompts: Any
    _posthog_init_attempted: bool

    def __new__(cls) -> "PromptManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._cache = {}
            cls._instance._posthog_prompts = None
            cls._instance._posthog_init_attempted = False
        return cls._instance

    def _get_posthog_prompts(self) -> Any:
        """Lazily initialize the PostHog Prompts client if configured."""
        if self._posthog_init_attempted:
            return self._posthog_prompts

        self._posthog_init_attempted = True

        personal_api_key = os.getenv("POSTHOG_PERSONAL_API_KEY")
        if not personal_api_key:
            return None

        try:
            from posthog.ai.prompts import Prompts

            host = os.getenv("POSTHOG_HOST", "https://us.posthog.com")
            self._posthog_prompts = Prompts(personal_api_key=personal_api_key, host=host)
            return self._posthog_prompts
        except ImportError:
            return None
        except Exception as e:
            logger.warning("PostHog prompts unavailable: %s", e)
            return None

    def _get_local(self, name: str, fallback: str | None = None) -> str:
        if name in self._cache:
            return self._cache[name]

        path = TEMPLATES_DIR / f"{name}.md"
        if not path.exists():
            if fallback is not None:
                return fallback
            raise FileNotFoundError(f"Prompt template not found: {path}")

        content = path.read_text(encoding="utf-8")
        self._cache[name] = content
        return content

    def get(self, name: str, fallback: str | None = None) -> str:
        """Load a prompt template by name.

        Raises:
            FileNotFoundError: If template doesn't exist and no fallback provided.
            ValueError: If name doesn't match ^[a-zA-Z0-9_-]+$.
        """
        if not _VALID_NAME_RE.match(name):
            raise ValueError(f"Invalid prompt name '{name}': must match ^[a-zA-Z0-9_-]+$")

        ph = self._get_posthog_prompts()
        if ph is not None:
            local_content = self._get_local(name, fallback=fallback)
            try:
                result: str = ph.get(name)
                return result
            except Exception as e:
                logger.warning("Failed to fetch prompt '%s' from PostHog, using local: %s", name, e)
                return local_content

        return self._get_local(name, fallback=fallback)

    def compile(self, template: str, variables: dict[str, str]) -> str:
        """Substitute {{var}} placeholders in a template string.

        Placeholders without a matching variable are left as-is and logged.
        Only the template's own placeholders are checked, so `{{...}}` inside
        substituted activity text (issue bodies, commit messages) is ignored.
        """
        missing = sorted(set(_PLACEHOLDER_RE.findall(template)) - variables.keys())
        if missing:
            logger.warning("Prompt placeholders left unfilled: %s", ", ".join(missing))

        result = template
        for key, value in variables.items():
            result = result.replace("{{" + key + "}}", value)
        return result

    def get_compiled(
        self,
        name: str,
        variables: dict[str, str],
        fallback: str | None = None,
    ) -> str:
        template = self.get(name, fallback=fallback)
        return self.compile(template, variables)

    def clear_cache(self) -> None:
        """Clear the template cache and reset the PostHog client."""
        self._cache.clear()
        self._posthog_prompts = None
        self._posthog_init_attempted = False


# Module-level convenience functions


def get_prompt(name: str, fallback: str | None = None) -> str:
    return PromptManager().get(name, fallback=fallback)


def compile_prompt(name: str, variables: dict[str, str], fallback: str | None = None) -> str:
    return PromptManager().get_compiled(name, variables, fallback=fallback)
