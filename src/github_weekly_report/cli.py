"""Command-line interface for GitHub Weekly Report."""

import asyncio
from enum import Enum
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from github_weekly_report import __version__
from github_weekly_report.config import CONFIG_FILE, ReportConfig
from github_weekly_report.context import ReportContext
from github_weekly_report.instrumentation import setup_posthog, shutdown_posthog
from github_weekly_report.log import setup_logging
from github_weekly_report.report import create_services, generate_weekly_report
from github_weekly_report.tools.slack_client import get_slack_client
from github_weekly_report.tools.status import ConsoleStatusSink, SlackStatusSink, StatusSink
from github_weekly_report.tools.user_store import SqliteUserStore

app = typer.Typer(
    name="weekly-report",
    help="Generate correlated weekly reports of GitHub repository activity.",
    no_args_is_help=True,
)
console = Console()


class OutputTarget(str, Enum):
    stdout = "stdout"
    slack = "slack"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"weekly-report {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version."),
    ] = None,
) -> None:
    """Weekly activity reports for GitHub repositories."""


def _make_sink(config: ReportConfig, output: OutputTarget) -> StatusSink:
    if output is OutputTarget.slack:
        token = config.get_slack_token()
        if not token or not config.slack_channel:
            console.print(
                "[red]Slack not configured.[/red] Set WEEKLY_REPORT_SLACK_BOT_TOKEN and "
                "WEEKLY_REPORT_SLACK_CHANNEL."
            )
            raise typer.Exit(1)
        return SlackStatusSink(get_slack_client(token), config.slack_channel)
    return ConsoleStatusSink()


@app.command()
def generate(
    owner: Annotated[str, typer.Argument(help="Repository owner (user or organization)")],
    repo: Annotated[str, typer.Argument(help="Repository name")],
    user: Annotated[
        str | None, typer.Option("--user", "-u", help="GitHub user to report on")
    ] = None,
    days: Annotated[
        int | None, typer.Option("--days", "-d", min=1, help="Days to look back")
    ] = None,
    output: Annotated[
        OutputTarget, typer.Option("--output", "-o", help="Where to send the report")
    ] = OutputTarget.stdout,
    verbose: Annotated[bool, typer.Option("--verbose", help="Debug logging")] = False,
) -> None:
    """Generate a weekly report for OWNER/REPO."""
    config = ReportConfig.load()
    setup_logging(config, verbose=verbose)
    setup_posthog()

    sink = _make_sink(config, output)
    try:
        services = create_services(config, sink)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    ctx = ReportContext(
        config=config,
        owner=owner,
        repo=repo,
        user_name=user,
        window_days=days or config.window_days,
    )
    try:
        report = asyncio.run(
            generate_weekly_report(ctx, services, deliver=output is OutputTarget.slack)
        )
    finally:
        shutdown_posthog()

    if output is OutputTarget.stdout:
        print(report.render())


@app.command("config")
def config_command(
    show: Annotated[bool, typer.Option("--show", help="Show current configuration")] = False,
    days: Annotated[int | None, typer.Option("--days", help="Set default window")] = None,
    model: Annotated[str | None, typer.Option("--model", help="Set model")] = None,
    slack_channel: Annotated[
        str | None, typer.Option("--slack-channel", help="Set Slack channel")
    ] = None,
) -> None:
    """Show or update configuration."""
    config = ReportConfig.load()

    changed = False
    if days is not None:
        config.window_days = days
        changed = True
    if model is not None:
        config.model = model
        changed = True
    if slack_channel is not None:
        config.slack_channel = slack_channel
        changed = True
    if changed:
        config.save()
        console.print(f"[green]Saved configuration to {CONFIG_FILE}[/green]")

    if show or not changed:
        table = Table(title="Configuration")
        table.add_column("Setting")
        table.add_column("Value")
        table.add_row("OpenAI API key", "set" if config.openai_api_key else "not set")
        table.add_row("GitHub token", "set" if config.get_github_token() else "gh auth")
        table.add_row("Slack", "enabled" if config.is_slack_enabled() else "disabled")
        table.add_row("Model", config.model)
        table.add_row("Window (days)", str(config.window_days))
        table.add_row("Source word budget", str(config.source_word_budget))
        table.add_row("Correlation word budget", str(config.correlate_word_budget))
        table.add_row("Data directory", str(config.data_dir))
        known_users = SqliteUserStore(config.users_db_file).list_users()
        table.add_row("Users reported on", str(len(known_users)))
        console.print(table)


if __name__ == "__main__":
    app()
