"""Merge the per-source summaries into the final weekly narrative."""

from github_weekly_report.context import ReportContext
from github_weekly_report.pipeline.budget import allocate
from github_weekly_report.pipeline.chain import CompletionService, chain
from github_weekly_report.prompts import compile_prompt, get_prompt

NO_REPORT_MESSAGE = "no report generated"
MISSING_SUMMARY = "No data for this period."


def no_data_message(user_name: str | None) -> str:
    if user_name:
        return (
            f"No useful data found for {user_name}, you may try `/search` "
            f"to find out more about {user_name}"
        )
    return "No useful data found, nothing to report"


async def correlate(
    ctx: ReportContext,
    service: CompletionService,
    profile_text: str,
    commits_summary: str,
    issues_summary: str,
    discussions_summary: str,
    user_name: str | None,
) -> str:
    """Correlate the summaries, or explain that there was nothing to correlate.

    The profile alone is never reported on: with no activity summaries the
    result is the no-data message regardless of `profile_text`.
    """
    if not (commits_summary or issues_summary or discussions_summary):
        return no_data_message(user_name)

    config = ctx.config
    commits_summary, issues_summary = allocate(
        commits_summary,
        issues_summary,
        config.correlate_word_budget,
        config.correlate_split_ratio,
    )

    system_prompt = compile_prompt(
        "correlate-system",
        {
            "addressee": ctx.addressee,
            "owner": ctx.owner,
            "repo": ctx.repo,
            "days": str(ctx.window_days),
        },
    )
    user_prompt_1 = compile_prompt(
        "correlate-summarize",
        {
            "profile": profile_text or MISSING_SUMMARY,
            "commits": commits_summary or MISSING_SUMMARY,
            "issues": issues_summary or MISSING_SUMMARY,
            "discussions": discussions_summary or MISSING_SUMMARY,
        },
    )

    result = await chain(
        service,
        system_prompt,
        user_prompt_1,
        ctx.chat_id("correlate"),
        config.correlate_gen_len_1,
        get_prompt("correlate-refine"),
        config.correlate_gen_len_2,
        error_tag=f"correlating summaries for {ctx.full_name}",
        temperature=config.temperature,
    )
    if result.summary is None:
        return NO_REPORT_MESSAGE
    return result.summary
