"""Data types shared by the fetchers, the pipeline and the presentation layer."""

from dataclasses import dataclass, field
from enum import Enum


class DataSource(str, Enum):
    """A category of GitHub activity fetched and summarized independently."""

    COMMITS = "commits"
    ISSUES = "issues"
    DISCUSSIONS = "discussions"


# Fixed processing order
SOURCE_ORDER: tuple[DataSource, ...] = (
    DataSource.COMMITS,
    DataSource.ISSUES,
    DataSource.DISCUSSIONS,
)


@dataclass(frozen=True)
class ActivityItem:
    """One commit, issue, or discussion thread as fetched from GitHub."""

    source_url: str
    body: str

    def short_id(self, length: int | None = None) -> str:
        """Last path segment of the source URL, optionally cut to `length` characters."""
        segment = self.source_url.rstrip("/").rsplit("/", 1)[-1]
        if length is not None:
            segment = segment[:length]
        return segment


@dataclass(frozen=True)
class FetchResult:
    """A successful fetch. A failed fetch is represented by None, not by this."""

    count: int
    items: tuple[ActivityItem, ...] = ()

    @classmethod
    def of(cls, items: list[ActivityItem]) -> "FetchResult":
        return cls(count=len(items), items=tuple(items))


@dataclass(frozen=True)
class TextBudget:
    """A word ceiling and how it is split between a primary and secondary block."""

    max_units: int
    split_ratio: float

    def __post_init__(self) -> None:
        if self.max_units < 0:
            raise ValueError(f"max_units must be non-negative, got {self.max_units}")
        if not 0.0 <= self.split_ratio <= 1.0:
            raise ValueError(f"split_ratio must be within [0, 1], got {self.split_ratio}")


class SourceOutcome(str, Enum):
    """Result of running one data source through the pipeline."""

    NO_DATA = "no_data"
    SUMMARIZED = "summarized"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceResult:
    source: DataSource
    outcome: SourceOutcome
    progress_line: str
    summary: str = ""


@dataclass(frozen=True)
class ReportSection:
    label: str
    text: str


@dataclass
class WeeklyReport:
    """The outcome of one report run.

    `body` is either the correlated narrative, or a standalone message (no data,
    invalid repository, no report generated) in which case `standalone` is True
    and the progress lines are not part of the rendered output.
    """

    body: str
    progress: list[str] = field(default_factory=list)
    sections: list[ReportSection] = field(default_factory=list)
    standalone: bool = False

    def render(self) -> str:
        if self.standalone or not self.progress:
            return self.body
        return "".join(f"{line}\n" for line in self.progress) + self.body
