"""FastMCP server exposing the weekly report to chat clients.

Run as: python -m github_weekly_report.mcp_server
"""

from typing import Any

from fastmcp import FastMCP

from github_weekly_report.config import ReportConfig
from github_weekly_report.context import ReportContext
from github_weekly_report.report import create_services, generate_weekly_report
from github_weekly_report.tools.status import NullStatusSink

mcp = FastMCP(
    "weekly-report",
    instructions=(
        "Generate a weekly report of a GitHub repository's activity. "
        "'what did alice do in acme/widget this week?' -> weekly_report(owner='acme', "
        "repo='widget', user='alice')."
    ),
)


@mcp.tool
async def weekly_report(
    owner: str,
    repo: str,
    user: str | None = None,
    days: int | None = None,
) -> dict[str, Any]:
    """Summarize recent commits, issues and discussions of owner/repo.

    With a user, the report focuses on that user's contributions; otherwise it
    covers the key participants of the project. Takes a few minutes.
    """
    config = ReportConfig.load()
    ctx = ReportContext(
        config=config,
        owner=owner,
        repo=repo,
        user_name=user or None,
        window_days=days or config.window_days,
    )
    try:
        services = create_services(config, NullStatusSink())
    except ValueError as e:
        return {"status": "error", "message": str(e)}

    report = await generate_weekly_report(ctx, services)

    return {
        "status": "ok",
        "repository": ctx.full_name,
        "progress": report.progress,
        "report": report.render(),
    }


if __name__ == "__main__":
    mcp.run()
