"""Per-run state passed through the report pipeline."""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from github_weekly_report.config import ReportConfig
from github_weekly_report.models import ReportSection


@dataclass
class ReportContext:
    """
    State for one report run.

    Created when a report is requested and discarded once the final report has
    been handed to the presentation sink. Nothing here is shared between runs.
    """

    # Configuration
    config: ReportConfig

    # Request parameters
    owner: str
    repo: str
    user_name: str | None = None
    window_days: int = 7

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    # "About owner/repo: ..." text, filled in once the repository is validated
    profile: str = ""

    # Running report buffer, one line per data source
    progress: list[str] = field(default_factory=list)

    # Non-empty summaries in fixed order: profile, commits, issues, discussions
    sections: list[ReportSection] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def addressee(self) -> str:
        """Possessive form used in prompts and status messages."""
        if self.user_name:
            return f"{self.user_name}'s"
        return "key community participants'"

    def chat_id(self, step: str) -> str:
        """Conversation id for one chained call in this run."""
        return f"{self.full_name}#{self.run_id}:{step}"
