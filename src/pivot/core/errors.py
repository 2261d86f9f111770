"""Structured error handling for Pivot."""

import sys
from typing import Any, NoReturn

from pivot.models.error import ErrorCode, StructuredError


class PivotError(Exception):
    """Base exception for Pivot errors.

    Wraps a StructuredError for consistent error handling.
    """

    def __init__(
        self,
        code: str,
        message: str,
        remediation: str,
        retryable: bool = False,
        context: dict[str, Any] | None = None,
    ):
        self.error = StructuredError(
            code=code,
            message=message,
            remediation=remediation,
            retryable=retryable,
            context=context,
        )
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.error.code

    def to_structured(self) -> StructuredError:
        """Convert to StructuredError."""
        return self.error

    def to_structured_error(self) -> dict:
        """Convert to JSON-serializable dict for output."""
        return self.error.model_dump(mode="json", exclude_none=True)


class InputNotFoundError(PivotError):
    """Input log file does not exist."""

    def __init__(self, path: str):
        super().__init__(
            code=ErrorCode.INPUT_NOT_FOUND,
            message=f"Log file not found: {path}",
            remediation="Check the path and try again",
            retryable=False,
            context={"path": path},
        )


class InputUnreadableError(PivotError):
    """Input path exists but cannot be opened as a file."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            code=ErrorCode.INPUT_UNREADABLE,
            message=f"Cannot read log file {path}: {reason}",
            remediation="Check file permissions and that the path is a regular file",
            retryable=False,
            context={"path": path, "reason": reason},
        )


class ParseError(PivotError):
    """Structured (JSON) input violates its format contract."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        index: int | None = None,
    ):
        context: dict[str, Any] = {}
        if path is not None:
            context["path"] = path
        if index is not None:
            context["index"] = index
        super().__init__(
            code=ErrorCode.MALFORMED_JSON,
            message=message,
            remediation="JSON input must be an array of event objects, each with a unique 'id'",
            retryable=False,
            context=context or None,
        )


class EventLimitExceededError(PivotError):
    """Input holds more events than the configured maximum."""

    def __init__(self, path: str, max_events: int):
        super().__init__(
            code=ErrorCode.RESOURCE_EXHAUSTED,
            message=f"{path} exceeds the maximum of {max_events} events",
            remediation="Split the log file or raise ingest.max_events in the config",
            retryable=False,
            context={"path": path, "max_events": max_events},
        )


class ReadTimeoutError(PivotError):
    """Reading the input took longer than the configured timeout."""

    def __init__(self, path: str, timeout_seconds: float):
        super().__init__(
            code=ErrorCode.TIMEOUT,
            message=f"Reading {path} exceeded {timeout_seconds}s",
            remediation="Raise ingest.read_timeout_seconds or use a smaller file",
            retryable=True,
            context={"path": path, "timeout_seconds": timeout_seconds},
        )


class ConfigError(PivotError):
    """Configuration file or rule set is invalid."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(
            code=ErrorCode.CONFIG_ERROR,
            message=message,
            remediation="Fix the configuration and try again",
            retryable=False,
            context={"path": path} if path else None,
        )


def handle_error(error: PivotError | Exception, exit_code: int = 1) -> NoReturn:
    """Handle an error by outputting it and exiting.

    Args:
        error: The error to handle
        exit_code: Exit code to use
    """
    from pivot.cli.output import output_error

    if isinstance(error, PivotError):
        output_error(error.to_structured())
    else:
        structured = StructuredError(
            code=ErrorCode.INTERNAL_ERROR,
            message=str(error),
            remediation="This is an unexpected error. Please report it.",
            retryable=False,
            context={"type": type(error).__name__},
        )
        output_error(structured)

    sys.exit(exit_code)
