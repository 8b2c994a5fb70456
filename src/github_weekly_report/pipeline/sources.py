"""Per-source fetch and summarize steps: commits, issues, discussions."""

import logging
from collections.abc import Mapping
from typing import Protocol

from github_weekly_report.context import ReportContext
from github_weekly_report.models import (
    SOURCE_ORDER,
    ActivityItem,
    DataSource,
    FetchResult,
    ReportSection,
    SourceOutcome,
    SourceResult,
)
from github_weekly_report.pipeline.budget import allocate, squeeze_comment
from github_weekly_report.pipeline.chain import CompletionService, chain
from github_weekly_report.prompts import compile_prompt, get_prompt
from github_weekly_report.tools.status import StatusSink, post_status

logger = logging.getLogger(__name__)

# Commit hashes are shown abbreviated, like `git log --oneline`
COMMIT_ID_LENGTH = 7


class ActivityFetcher(Protocol):
    """Fetches one data source's items for a repository and time window.

    Returns None when the fetch itself failed, and an empty FetchResult when it
    succeeded but found nothing.
    """

    async def fetch(
        self,
        owner: str,
        repo: str,
        user: str | None,
        window_days: int,
    ) -> FetchResult | None: ...


def short_ids(source: DataSource, items: tuple[ActivityItem, ...]) -> str:
    length = COMMIT_ID_LENGTH if source is DataSource.COMMITS else None
    return ", ".join(item.short_id(length) for item in items)


def progress_line(source: DataSource, result: FetchResult) -> str:
    return f"found {result.count} {source.value}: {short_ids(source, result.items)}"


def build_activity_text(ctx: ReportContext, items: tuple[ActivityItem, ...]) -> str:
    """Squeeze every item body and join them into one block of text."""
    config = ctx.config
    bodies = [
        squeeze_comment(
            item.body,
            config.quote_marker,
            config.comment_word_cap,
            config.comment_split_ratio,
        )
        for item in items
    ]
    return "\n\n".join(body.strip() for body in bodies if body.strip())


async def summarize_source(
    ctx: ReportContext,
    source: DataSource,
    items: tuple[ActivityItem, ...],
    service: CompletionService,
) -> str | None:
    """Fit the items into the source budget and run the chained summarizer."""
    config = ctx.config
    activity, profile = allocate(
        build_activity_text(ctx, items),
        ctx.profile,
        config.source_word_budget,
        config.source_split_ratio,
    )

    system_prompt = compile_prompt(
        "source-system",
        {
            "addressee": ctx.addressee,
            "owner": ctx.owner,
            "repo": ctx.repo,
            "source": source.value,
            "days": str(ctx.window_days),
            "guidance": get_prompt(f"{source.value}-guidance"),
        },
    )
    user_prompt_1 = compile_prompt(
        "source-summarize",
        {"profile": profile, "activity": activity, "source": source.value},
    )
    user_prompt_2 = compile_prompt(
        "source-refine", {"max_words": str(config.source_gen_len_2 // 2)}
    )

    result = await chain(
        service,
        system_prompt,
        user_prompt_1,
        ctx.chat_id(source.value),
        config.source_gen_len_1,
        user_prompt_2,
        config.source_gen_len_2,
        error_tag=f"{source.value} summary for {ctx.full_name}",
        temperature=config.temperature,
    )
    return result.summary


async def run_source(
    ctx: ReportContext,
    source: DataSource,
    fetcher: ActivityFetcher,
    service: CompletionService,
    sink: StatusSink,
) -> SourceResult:
    """Fetch, report progress, and summarize a single data source."""
    fetched = await fetcher.fetch(ctx.owner, ctx.repo, ctx.user_name, ctx.window_days)
    if fetched is None:
        logger.error("failed to get %s for %s", source.value, ctx.full_name)
        fetched = FetchResult(count=0)

    line = progress_line(source, fetched)
    ctx.progress.append(line)
    await post_status(sink, line)

    if fetched.count == 0 or not fetched.items:
        return SourceResult(source, SourceOutcome.NO_DATA, line)

    summary = await summarize_source(ctx, source, fetched.items, service)
    if summary is None:
        logger.error("processing %s failed", source.value)
        return SourceResult(source, SourceOutcome.FAILED, line)

    ctx.sections.append(ReportSection(source.value, summary))
    return SourceResult(source, SourceOutcome.SUMMARIZED, line, summary)


async def run_sources(
    ctx: ReportContext,
    fetchers: Mapping[DataSource, ActivityFetcher],
    service: CompletionService,
    sink: StatusSink,
) -> dict[DataSource, SourceResult]:
    """Run every data source in fixed order, one after the other."""
    results: dict[DataSource, SourceResult] = {}
    for source in SOURCE_ORDER:
        results[source] = await run_source(ctx, source, fetchers[source], service, sink)
    return results
