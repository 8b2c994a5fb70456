"""Optional PostHog instrumentation for report runs."""

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

_posthog_client: Any = None
_distinct_id: str = "weekly-report-bot"

# Check for debug mode
POSTHOG_DEBUG = os.getenv("POSTHOG_DEBUG", "false").lower() in ("true", "1", "yes")


def setup_posthog(distinct_id: str | None = None) -> bool:
    """
    Initialize PostHog if configured via environment.

    Environment variables:
        POSTHOG_API_KEY: PostHog project API key (required to enable)
        POSTHOG_HOST: PostHog host (default: https://us.posthog.com)
        POSTHOG_DISTINCT_ID: Identifier for events

    Returns:
        True if instrumentation was enabled, False otherwise.
    """
    global _posthog_client, _distinct_id

    api_key = os.getenv("POSTHOG_API_KEY")
    if not api_key:
        return False

    host = os.getenv("POSTHOG_HOST", "https://us.posthog.com")
    _distinct_id = distinct_id or os.getenv("POSTHOG_DISTINCT_ID", _distinct_id)

    try:
        from posthog import Posthog

        _posthog_client = Posthog(api_key, host=host, debug=POSTHOG_DEBUG)
        logger.debug("PostHog enabled, host=%s distinct_id=%s", host, _distinct_id)
        return True
    except ImportError:
        return False
    except Exception as e:
        logger.warning("Failed to initialize PostHog: %s", e)
        return False


def capture_event(event_name: str, properties: dict[str, Any] | None = None) -> None:
    """Send an event if PostHog is enabled; never raises."""
    if _posthog_client is None:
        return
    try:
        _posthog_client.capture(
            event_name,
            distinct_id=_distinct_id,
            properties={"app": "github-weekly-report", **(properties or {})},
        )
    except Exception as e:
        logger.debug("PostHog capture of %s failed: %s", event_name, e)


def shutdown_posthog() -> None:
    """Flush and shutdown the PostHog client."""
    global _posthog_client
    if _posthog_client:
        try:
            _posthog_client.flush()
            _posthog_client.shutdown()
        except Exception as e:
            logger.debug("PostHog shutdown failed: %s", e)
        _posthog_client = None
