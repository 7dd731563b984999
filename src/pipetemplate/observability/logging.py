"""
Logging — Structured logging with run ID propagation.

Every pipeline run gets a run ID; records emitted while the run is
active carry it so a single instantiation can be traced end to end.
"""

import logging
import json
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any
from uuid import UUID


ROOT_LOGGER = "pipetemplate"

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)


def set_run_id(run_id: UUID | str | None) -> None:
    """Set run ID for current context."""
    _run_id.set(str(run_id) if run_id else None)


def get_run_id() -> str | None:
    """Get run ID from current context."""
    return _run_id.get()


class RunIdFilter(logging.Filter):
    """Adds run_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = get_run_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """Formats log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": getattr(record, "run_id", None),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class ReadableFormatter(logging.Formatter):
    """Human-readable formatter for terminals."""

    def format(self, record: logging.LogRecord) -> str:
        run_id = getattr(record, "run_id", "-")
        run_short = run_id[:8] if run_id and run_id != "-" else "-"

        base = f"{record.levelname:<7} [{run_short}] {record.name}: {record.getMessage()}"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


def configure_logging(
    level: int = logging.INFO,
    json_format: bool = False,
    stream: Any = None,
) -> None:
    """
    Configure pipetemplate logging.

    Args:
        level: Logging level
        json_format: Emit JSON lines instead of readable text
        stream: Output stream (default: stderr)
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.addFilter(RunIdFilter())
    handler.setFormatter(JSONFormatter() if json_format else ReadableFormatter())

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the pipetemplate hierarchy."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class RunContext:
    """
    Context manager binding a run ID to log records.

    Usage:
        with RunContext(run_id):
            logger.info("Creating resources...")
    """

    def __init__(self, run_id: UUID | str | None):
        self.run_id = run_id
        self._token = None

    def __enter__(self):
        self._token = _run_id.set(str(self.run_id) if self.run_id else None)
        return self

    def __exit__(self, *args):
        if self._token is not None:
            _run_id.reset(self._token)
