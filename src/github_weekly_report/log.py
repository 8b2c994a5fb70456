"""Logging setup with report-run context.

Every record carries the id of the report run it belongs to, so interleaved
runs (e.g. several MCP requests) can be told apart in the output.
"""

import contextvars
import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Context variable for report run id propagation
run_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("run_id", default="-")

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "run_id"}
)


def set_run_context(run_id: str) -> contextvars.Token[str]:
    """Set the current report run id for log context propagation."""
    return run_id_var.set(run_id)


def reset_run_context(token: contextvars.Token[str]) -> None:
    run_id_var.reset(token)


class ContextFilter(logging.Filter):
    """Injects the current run id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = run_id_var.get()
        return True


class JsonFormatter(logging.Formatter):
    """Single-line JSON records, including any `extra=` fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": getattr(record, "run_id", "-"),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            try:
                json.dumps(value)
                log_data[key] = value
            except (TypeError, ValueError):
                log_data[key] = str(value)

        return json.dumps(log_data, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Format: TIME [LEVEL] [run_id] logger: message"""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] [%(run_id)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )


def setup_logging(config: Any, verbose: bool = False) -> None:
    """Configure the root logger from `config.log_level` and `config.log_format`."""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter() if config.log_format == "json" else TextFormatter())
    handler.addFilter(ContextFilter())

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)

    # Reduce noise from third-party libraries
    for lib in ("httpx", "httpcore", "openai", "openai.agents", "slack_sdk", "urllib3"):
        logging.getLogger(lib).setLevel(logging.WARNING)
