"""Event normalizer entry point.

Selects a dialect per file and wraps its event stream with the
configured ingestion guards.
"""

import os
import time
from collections.abc import Iterator
from pathlib import Path

from pivot.core.config import IngestConfig
from pivot.core.errors import (
    EventLimitExceededError,
    InputNotFoundError,
    InputUnreadableError,
    ReadTimeoutError,
)
from pivot.core.logging import get_logger
from pivot.models.event import Event
from pivot.normalizer.base import BaseDialect, DialectRegistry

logger = get_logger("normalizer")


class EventNormalizer:
    """Turns a log file into a lazy, finite, non-restartable Event stream."""

    def __init__(self, config: IngestConfig | None = None) -> None:
        self.config = config or IngestConfig()

    def dialect_for(self, file_path: Path) -> BaseDialect:
        """Instantiate the dialect selected by the file extension."""
        dialect_class = DialectRegistry.for_path(file_path)
        return dialect_class(chunk_size=self.config.chunk_size)

    def stream(self, path: Path | str) -> Iterator[Event]:
        """Open a log file and return its events as a generator.

        The path is checked immediately; parsing happens as the
        generator is consumed.

        Raises:
            InputNotFoundError: If the path does not exist
            InputUnreadableError: If the path is not a readable file
        """
        file_path = Path(path)
        self._check_readable(file_path)

        dialect = self.dialect_for(file_path)
        logger.debug("Selected dialect", path=str(file_path), dialect=dialect.name)
        return self._guarded(dialect.parse(file_path), file_path)

    def _check_readable(self, file_path: Path) -> None:
        if not file_path.exists():
            raise InputNotFoundError(str(file_path))
        if not file_path.is_file():
            raise InputUnreadableError(str(file_path), "not a regular file")
        if not os.access(file_path, os.R_OK):
            raise InputUnreadableError(str(file_path), "permission denied")

    def _guarded(self, events: Iterator[Event], file_path: Path) -> Iterator[Event]:
        """Enforce max_events and read_timeout_seconds on a dialect stream."""
        max_events = self.config.max_events
        timeout = self.config.read_timeout_seconds
        deadline = time.monotonic() + timeout if timeout is not None else None

        count = 0
        for event in events:
            count += 1
            if max_events is not None and count > max_events:
                raise EventLimitExceededError(str(file_path), max_events)
            if deadline is not None and time.monotonic() > deadline:
                raise ReadTimeoutError(str(file_path), timeout)
            yield event

        logger.debug("Normalized events", path=str(file_path), count=count)


def load_events(path: Path | str, config: IngestConfig | None = None) -> list[Event]:
    """Normalize a whole log file into a list of events.

    Args:
        path: Path to the log file
        config: Ingestion limits (defaults apply when omitted)

    Returns:
        Events in file order
    """
    return list(EventNormalizer(config).stream(path))
