"""One weekly report run, from repository validation to the final message."""

import asyncio
import logging
import sqlite3
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from github_weekly_report.config import ReportConfig
from github_weekly_report.context import ReportContext
from github_weekly_report.instrumentation import capture_event
from github_weekly_report.log import reset_run_context, set_run_context
from github_weekly_report.models import (
    DataSource,
    ReportSection,
    SourceOutcome,
    WeeklyReport,
)
from github_weekly_report.pipeline.chain import CompletionService
from github_weekly_report.pipeline.correlate import NO_REPORT_MESSAGE, correlate
from github_weekly_report.pipeline.sources import ActivityFetcher, run_sources
from github_weekly_report.tools.status import StatusSink, post_status
from github_weekly_report.tools.user_store import DedupStore

logger = logging.getLogger(__name__)

INVALID_REPO_MESSAGE = (
    "You've entered invalid owner/repo, or the target is private. Please try again."
)


class RepositoryDirectory(Protocol):
    async def get_profile(self, owner: str, repo: str) -> str | None: ...

    async def is_code_contributor(self, owner: str, repo: str, user: str) -> bool: ...


@dataclass
class ReportServices:
    """External collaborators used by a report run."""

    repositories: RepositoryDirectory
    fetchers: Mapping[DataSource, ActivityFetcher]
    completion: CompletionService
    sink: StatusSink
    user_store: DedupStore | None = None


def create_services(config: ReportConfig, sink: StatusSink) -> ReportServices:
    """Wire the `gh`-backed fetchers, the OpenAI completion backend and the user store."""
    from github_weekly_report.agents.report_writer import AgentsCompletionService
    from github_weekly_report.tools.github import GitHubRepositories, create_fetchers
    from github_weekly_report.tools.user_store import SqliteUserStore

    token = config.get_github_token()
    return ReportServices(
        repositories=GitHubRepositories(token),
        fetchers=create_fetchers(token),
        completion=AgentsCompletionService.from_config(config),
        sink=sink,
        user_store=SqliteUserStore(config.users_db_file),
    )


async def _announce_user(ctx: ReportContext, services: ReportServices) -> None:
    if ctx.user_name is None:
        await post_status(
            services.sink,
            "You didn't input a user's name. Bot will then create a report on the "
            f"weekly progress of {ctx.full_name}.",
        )
        return

    if not await services.repositories.is_code_contributor(ctx.owner, ctx.repo, ctx.user_name):
        await post_status(
            services.sink,
            f"{ctx.user_name} hasn't contributed code to {ctx.full_name}. "
            f"Bot will try to find out {ctx.user_name}'s other contributions.",
        )

    if services.user_store is not None:
        try:
            is_new = await asyncio.to_thread(
                services.user_store.contains_and_insert, ctx.user_name
            )
        except (sqlite3.Error, OSError) as e:
            logger.error("recording user %s failed: %s", ctx.user_name, e)
            return
        if is_new:
            logger.info("first report requested for %s", ctx.user_name)
            capture_event("new_user_reported", {"user_name": ctx.user_name})


async def _run(ctx: ReportContext, services: ReportServices) -> WeeklyReport:
    profile = await services.repositories.get_profile(ctx.owner, ctx.repo)
    if profile is None:
        return WeeklyReport(INVALID_REPO_MESSAGE, standalone=True)

    ctx.profile = profile
    ctx.sections.append(ReportSection("profile", profile))

    await _announce_user(ctx, services)
    await post_status(
        services.sink,
        f"exploring {ctx.addressee} GitHub contributions to `{ctx.full_name}` project",
    )

    results = await run_sources(ctx, services.fetchers, services.completion, services.sink)

    body = await correlate(
        ctx,
        services.completion,
        ctx.profile,
        results[DataSource.COMMITS].summary,
        results[DataSource.ISSUES].summary,
        results[DataSource.DISCUSSIONS].summary,
        ctx.user_name,
    )
    summarized = any(r.outcome is SourceOutcome.SUMMARIZED for r in results.values())
    report = WeeklyReport(
        body=body,
        progress=list(ctx.progress),
        sections=list(ctx.sections),
        standalone=not summarized or body == NO_REPORT_MESSAGE,
    )

    capture_event(
        "weekly_report_generated",
        {
            "repository": ctx.full_name,
            "user_name": ctx.user_name,
            "window_days": ctx.window_days,
            "outcomes": {source.value: r.outcome.value for source, r in results.items()},
            "report_length": len(report.body),
        },
    )
    return report


async def generate_weekly_report(
    ctx: ReportContext,
    services: ReportServices,
    deliver: bool = True,
) -> WeeklyReport:
    """Run the whole report and, with `deliver`, push the final text to the status sink.

    Callers that present the report themselves (the CLI printing to stdout)
    pass `deliver=False` so the sink only shows progress.

    Steps run strictly one after another; fetch and generation failures only
    shrink the report, they never abort it.
    """
    token = set_run_context(ctx.run_id)
    try:
        logger.info(
            "weekly report for %s (user=%s, %d days)",
            ctx.full_name,
            ctx.user_name,
            ctx.window_days,
        )
        report = await _run(ctx, services)
        if deliver:
            await post_status(services.sink, report.render())
        elapsed = (datetime.now(UTC) - ctx.started_at).total_seconds()
        logger.info("weekly report for %s done in %.1fs", ctx.full_name, elapsed)
        return report
    finally:
        reset_run_context(token)
