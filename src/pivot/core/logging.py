"""Logging utilities for Pivot.

All log output goes to stderr to keep stdout clean for timeline
results (JSON/JSONL/markdown).
"""

import json
import sys
from datetime import UTC, datetime
from typing import Any, Literal

LogLevel = Literal["debug", "info", "warning", "error"]

_verbose = False
_quiet = False
_log_format: Literal["text", "json"] = "text"


def configure_logging(
    log_format: Literal["text", "json"] = "text",
    quiet: bool = False,
    verbose: bool = False,
) -> None:
    """Configure logging settings.

    Args:
        log_format: Output format for log messages
        quiet: Suppress debug and info messages
        verbose: Emit debug messages
    """
    global _log_format, _quiet, _verbose
    _log_format = log_format
    _quiet = quiet
    _verbose = verbose


def log(
    message: str,
    level: LogLevel = "info",
    component: str | None = None,
    **context: Any,
) -> None:
    """Log a message to stderr.

    Args:
        message: Log message
        level: Log level
        component: Pipeline stage emitting the message
        **context: Additional context to include
    """
    if _quiet and level in ("debug", "info"):
        return

    if level == "debug" and not _verbose:
        return

    if _log_format == "json":
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": level,
            "message": message,
        }
        if component:
            log_entry["component"] = component
        log_entry.update(context)
        print(json.dumps(log_entry, default=str), file=sys.stderr)
        return

    parts = []
    if level != "info":
        parts.append(f"[{level.upper()}]")
    if component:
        parts.append(f"{component}:")
    parts.append(message)
    if context:
        parts.append(" ".join(f"{k}={v}" for k, v in context.items()))
    print(" ".join(parts), file=sys.stderr)


class ComponentLogger:
    """Logger bound to one pipeline component."""

    def __init__(self, component: str) -> None:
        self.component = component

    def debug(self, message: str, **context: Any) -> None:
        log(message, level="debug", component=self.component, **context)

    def info(self, message: str, **context: Any) -> None:
        log(message, level="info", component=self.component, **context)

    def warning(self, message: str, **context: Any) -> None:
        log(message, level="warning", component=self.component, **context)

    def error(self, message: str, **context: Any) -> None:
        log(message, level="error", component=self.component, **context)


def get_logger(component: str) -> ComponentLogger:
    """Get a logger that tags every message with ``component``."""
    return ComponentLogger(component)
