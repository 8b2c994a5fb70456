"""Presentation sinks that show report progress to the requester."""

import asyncio
import logging
from typing import Protocol

from rich.console import Console
from slack_sdk import WebClient

from github_weekly_report.tools.slack_client import (
    SlackClientError,
    post_message,
    resolve_channel_id,
    update_message,
)

logger = logging.getLogger(__name__)


class StatusSink(Protocol):
    """Shows the latest status text for one report request."""

    def update_status(self, text: str) -> None: ...


class SlackStatusSink:
    """Keeps a single Slack message up to date with the report's progress.

    The first update posts the message; later updates edit it in place.
    """

    def __init__(self, client: WebClient, channel: str):
        self.client = client
        self.channel = channel
        self.channel_id: str | None = None
        self.ts: str | None = None

    def update_status(self, text: str) -> None:
        if self.channel_id is None:
            self.channel_id = resolve_channel_id(self.client, self.channel)
        if self.ts is None:
            self.ts = post_message(self.client, self.channel_id, text)
        else:
            update_message(self.client, self.channel_id, self.ts, text)


class ConsoleStatusSink:
    """Prints status lines to the terminal."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(stderr=True)

    def update_status(self, text: str) -> None:
        self.console.print(f"[dim]🤖 {text}[/dim]", highlight=False)


class NullStatusSink:
    """Discards all status updates."""

    def update_status(self, text: str) -> None:
        pass


async def post_status(sink: StatusSink, text: str) -> None:
    """Best-effort status update. Sink failures are logged and never propagate."""
    try:
        await asyncio.to_thread(sink.update_status, text)
    except SlackClientError as e:
        logger.warning("status update failed: %s", e)
    except Exception:
        logger.warning("status update failed", exc_info=True)
