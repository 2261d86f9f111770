"""Base dialect interface for the event normalizer."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import ClassVar, TextIO

from pivot.core.errors import InputUnreadableError
from pivot.models.event import Event


class BaseDialect(ABC):
    """Base class for input dialects.

    A dialect turns one log file into a lazy sequence of Events.
    Dialects are selected by file extension through DialectRegistry.
    """

    # Dialect metadata (must be set by subclasses)
    name: ClassVar[str]
    extensions: ClassVar[list[str]]

    def __init__(self, chunk_size: int = 64 * 1024) -> None:
        """Initialize dialect.

        Args:
            chunk_size: Read size for incremental decoding
        """
        self.chunk_size = chunk_size

    @abstractmethod
    def parse(self, file_path: Path) -> Iterator[Event]:
        """Parse a log file and yield events in file order.

        Args:
            file_path: Path to the log file

        Yields:
            Event instances
        """
        ...

    def open_text(self, file_path: Path, errors: str = "strict") -> TextIO:
        """Open a log file for text reading.

        Raises:
            InputUnreadableError: If the file cannot be opened
        """
        try:
            return open(file_path, encoding="utf-8-sig", errors=errors, newline=None)
        except OSError as e:
            raise InputUnreadableError(str(file_path), e.strerror or str(e)) from e


class DialectRegistry:
    """Registry of input dialects keyed by file extension."""

    _dialects: ClassVar[dict[str, type[BaseDialect]]] = {}
    _fallback: ClassVar[type[BaseDialect] | None] = None

    @classmethod
    def register(cls, dialect_class: type[BaseDialect]) -> type[BaseDialect]:
        """Register a dialect class for its extensions.

        A dialect with no extensions becomes the fallback for any
        extension nobody else claims.

        Returns:
            The registered class (for use as decorator)
        """
        if not dialect_class.extensions:
            cls._fallback = dialect_class
        for extension in dialect_class.extensions:
            cls._dialects[extension.lower()] = dialect_class
        return dialect_class

    @classmethod
    def for_path(cls, file_path: Path) -> type[BaseDialect]:
        """Select the dialect for a file by its extension.

        Raises:
            LookupError: If no dialect matches and no fallback is registered
        """
        dialect = cls._dialects.get(file_path.suffix.lower(), cls._fallback)
        if dialect is None:
            raise LookupError(f"No dialect registered for {file_path.suffix!r}")
        return dialect

    @classmethod
    def supported_extensions(cls) -> list[str]:
        return sorted(cls._dialects)
