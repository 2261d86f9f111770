"""JSON array dialect.

Input is a JSON array of already-structured event objects::

    [
      {"id": "1", "timestamp": "2023-01-01T10:00:00Z", "level": "ERROR",
       "source": "auth", "message": "Failed login", "metadata": {"ip": "1.2.3.4"}},
      ...
    ]

The array is decoded one element at a time from fixed-size reads, so
arbitrarily large files are never buffered whole. Any structural problem
is fatal for the whole file.
"""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any, ClassVar, TextIO

from pydantic import ValidationError

from pivot.core.errors import ParseError
from pivot.models.event import Event
from pivot.normalizer.base import BaseDialect, DialectRegistry

DEFAULT_SOURCE = "json-log"

_WHITESPACE = " \t\n\r"

# Longest token a chunk boundary can cut mid-way: a surrogate-pair escape
_TRUNCATION_WINDOW = 12


class JsonArrayReader:
    """Pull-based reader yielding the elements of a top-level JSON array."""

    def __init__(self, stream: TextIO, path: str, chunk_size: int = 64 * 1024) -> None:
        self._stream = stream
        self._path = path
        self._chunk_size = chunk_size
        self._decoder = json.JSONDecoder()
        self._buffer = ""
        self._pos = 0
        self._eof = False

    def __iter__(self) -> Iterator[Any]:
        first = self._peek()
        if first is None:
            # Whitespace-only file: no events
            return
        if first != "[":
            raise ParseError(
                f"{self._path}: top-level JSON value must be an array",
                path=self._path,
            )
        self._pos += 1

        if self._peek() == "]":
            self._pos += 1
            self._expect_end()
            return

        index = 0
        while True:
            if self._peek() is None:
                raise ParseError(
                    f"{self._path}: unexpected end of input in array",
                    path=self._path,
                    index=index,
                )
            yield self._decode_value(index)
            index += 1

            separator = self._peek()
            if separator == ",":
                self._pos += 1
                continue
            if separator == "]":
                self._pos += 1
                break
            raise ParseError(
                f"{self._path}: expected ',' or ']' after element {index - 1}",
                path=self._path,
                index=index - 1,
            )

        self._expect_end()

    def _fill(self) -> bool:
        """Read the next chunk, dropping the consumed prefix."""
        if self._eof:
            return False
        try:
            chunk = self._stream.read(self._chunk_size)
        except UnicodeDecodeError as e:
            raise ParseError(f"{self._path}: invalid UTF-8: {e}", path=self._path) from e
        if not chunk:
            self._eof = True
            return False
        self._buffer = self._buffer[self._pos:] + chunk
        self._pos = 0
        return True

    def _peek(self) -> str | None:
        """Skip whitespace and return the next significant character."""
        while True:
            while self._pos < len(self._buffer) and self._buffer[self._pos] in _WHITESPACE:
                self._pos += 1
            if self._pos < len(self._buffer):
                return self._buffer[self._pos]
            if not self._fill():
                return None

    def _decode_value(self, index: int) -> Any:
        while True:
            try:
                value, end = self._decoder.raw_decode(self._buffer, self._pos)
            except json.JSONDecodeError as e:
                if self._is_truncated(e) and self._fill():
                    continue
                raise ParseError(
                    f"{self._path}: malformed JSON in element {index}: {e.msg}",
                    path=self._path,
                    index=index,
                ) from e
            # A number or literal touching the buffer end may continue in the next chunk
            if end == len(self._buffer) and self._fill():
                continue
            self._pos = end
            return value

    def _is_truncated(self, error: json.JSONDecodeError) -> bool:
        """Whether a decode error may only mean the value continues in the next chunk."""
        if error.msg.startswith("Unterminated string"):
            return True
        return error.pos >= len(self._buffer) - _TRUNCATION_WINDOW

    def _expect_end(self) -> None:
        if self._peek() is not None:
            raise ParseError(
                f"{self._path}: unexpected data after the closing ']'",
                path=self._path,
            )


@DialectRegistry.register
class JsonArrayDialect(BaseDialect):
    """Strict dialect for JSON arrays of structured events."""

    name: ClassVar[str] = "json"
    extensions: ClassVar[list[str]] = [".json"]

    def parse(self, file_path: Path) -> Iterator[Event]:
        """Parse a JSON array file, one event per element.

        Raises:
            ParseError: On malformed JSON, a non-array top level, a
                non-object element, an invalid event or a duplicate id
        """
        path = str(file_path)
        seen_ids: set[str] = set()

        with self.open_text(file_path) as f:
            for index, element in enumerate(JsonArrayReader(f, path, self.chunk_size)):
                event = self.to_event(element, path, index)
                if event.id in seen_ids:
                    raise ParseError(
                        f"{path}: duplicate event id {event.id!r} in element {index}",
                        path=path,
                        index=index,
                    )
                seen_ids.add(event.id)
                yield event

    def to_event(self, element: Any, path: str, index: int) -> Event:
        """Validate one array element as an Event."""
        if not isinstance(element, dict):
            raise ParseError(
                f"{path}: element {index} is {type(element).__name__}, expected object",
                path=path,
                index=index,
            )
        try:
            return Event.model_validate({"source": DEFAULT_SOURCE, **element})
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ParseError(
                f"{path}: invalid event in element {index}: {problems}",
                path=path,
                index=index,
            ) from e
