"""Configuration management for GitHub Weekly Report."""

import os
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Config directory
CONFIG_DIR = Path.home() / ".config" / "weekly-report"
DATA_DIR = Path.home() / ".local" / "share" / "weekly-report"

# Default model for the chained summarizer
DEFAULT_MODEL = "gpt-4.1-mini"
CONFIG_FILE = CONFIG_DIR / "config.json"
USERS_DB_FILE = DATA_DIR / "users.db"


class ReportConfig(BaseSettings):
    """Configuration for the weekly report generator."""

    model_config = SettingsConfigDict(
        env_prefix="WEEKLY_REPORT_",
        env_file=".env",
        extra="ignore",
    )

    # API Key (required for generation)
    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
    )

    # GitHub settings (falls back to `gh auth` when unset)
    github_token: SecretStr | None = Field(
        default=None,
        validation_alias="GH_TOKEN",
    )

    # Slack settings
    slack_bot_token: SecretStr | None = Field(
        default=None,
        validation_alias="WEEKLY_REPORT_SLACK_BOT_TOKEN",
    )
    slack_channel: str | None = None  # Channel name (without #) or channel ID

    # Model settings
    model: str = DEFAULT_MODEL
    temperature: float = 0.7

    # Report window
    window_days: int = 7

    # Word budgets (whitespace words, not model tokens)
    source_word_budget: int = 12_000
    source_split_ratio: float = 0.9
    correlate_word_budget: int = 44_000
    correlate_split_ratio: float = 0.6
    comment_word_cap: int = 1_500
    comment_split_ratio: float = 0.5
    quote_marker: str = "```"

    # Output length caps per chained call
    source_gen_len_1: int = 1_024
    source_gen_len_2: int = 512
    correlate_gen_len_1: int = 2_048
    correlate_gen_len_2: int = 1_024

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # text, json

    data_dir: Path = DATA_DIR

    def save(self) -> None:
        """Save configuration to file."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        # Don't save secrets to file for security
        CONFIG_FILE.write_text(
            self.model_dump_json(
                indent=2, exclude={"openai_api_key", "github_token", "slack_bot_token"}
            )
        )

    @classmethod
    def load(cls) -> "ReportConfig":
        """Load configuration from file and environment."""
        if CONFIG_FILE.exists():
            file_config = CONFIG_FILE.read_text()
            return cls.model_validate_json(file_config)
        return cls()

    def get_api_key(self) -> str:
        """Get the OpenAI API key, raising an error if not set."""
        if self.openai_api_key is None:
            # Check environment directly as fallback
            env_key = os.getenv("OPENAI_API_KEY")
            if env_key:
                return env_key
            raise ValueError(
                "OpenAI API key not found. Set OPENAI_API_KEY environment variable."
            )
        return self.openai_api_key.get_secret_value()

    def get_github_token(self) -> str | None:
        """Get the GitHub token, returning None to let `gh` use its own auth."""
        if self.github_token is None:
            return os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN")
        return self.github_token.get_secret_value()

    def get_slack_token(self) -> str | None:
        """Get the Slack bot token, returning None if not set."""
        if self.slack_bot_token is None:
            return os.getenv("WEEKLY_REPORT_SLACK_BOT_TOKEN")
        return self.slack_bot_token.get_secret_value()

    def is_slack_enabled(self) -> bool:
        """Check if Slack integration is properly configured."""
        return bool(self.get_slack_token() and self.slack_channel)

    @property
    def users_db_file(self) -> Path:
        return self.data_dir / USERS_DB_FILE.name
