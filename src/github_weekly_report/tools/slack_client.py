"""Slack client utility for posting and editing report messages."""

from functools import lru_cache
from typing import Any, cast

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError


class SlackClientError(Exception):
    """Error communicating with Slack API."""

    pass


@lru_cache(maxsize=1)
def get_slack_client(token: str) -> WebClient:
    """Get or create a Slack WebClient."""
    return WebClient(token=token)


def resolve_channel_id(client: WebClient, channel_name: str) -> str:
    """Resolve a channel name to its ID.

    Args:
        client: Slack WebClient
        channel_name: Channel name (with or without #) or channel ID

    Returns:
        Channel ID

    Raises:
        SlackClientError: If channel not found or API error
    """
    # If already an ID (starts with C or G), return it
    if channel_name.startswith(("C", "G")):
        return channel_name

    channel_name = channel_name.lstrip("#")

    try:
        cursor: str | None = None
        while True:
            result = client.conversations_list(
                types="public_channel,private_channel",
                cursor=cursor,
                limit=200,
            )

            channels = cast(list[dict[str, Any]], result.get("channels", []))
            for channel in channels:
                if channel["name"] == channel_name:
                    return str(channel["id"])

            metadata = cast(dict[str, Any], result.get("response_metadata", {}))
            cursor = metadata.get("next_cursor")
            if not cursor:
                break

        raise SlackClientError(f"Channel '{channel_name}' not found")

    except SlackApiError as e:
        raise SlackClientError(f"Slack API error: {e.response['error']}") from e


def post_message(client: WebClient, channel_id: str, text: str) -> str:
    """Post a new message and return its timestamp, which identifies it for edits."""
    try:
        result = client.chat_postMessage(
            channel=channel_id,
            text=text,
            unfurl_links=False,
            unfurl_media=False,
        )
        return str(result["ts"])
    except SlackApiError as e:
        raise SlackClientError(f"Slack API error: {e.response['error']}") from e


def update_message(client: WebClient, channel_id: str, ts: str, text: str) -> None:
    """Replace the text of a previously posted message."""
    try:
        client.chat_update(channel=channel_id, ts=ts, text=text)
    except SlackApiError as e:
        raise SlackClientError(f"Slack API error: {e.response['error']}") from e
