"""Free-text log dialect.

Line-oriented and lenient: every non-blank line becomes one Event, no
matter how noisy. Fields are recovered with best-effort pattern scans:

- timestamp: first ISO-8601-like or syslog-style stamp, else now
- level: first INFO/WARN/ERROR/DEBUG/CRITICAL/FATAL word, else INFO
- metadata: IPv4 address plus user/device/session ``key=value`` tokens
"""

import re
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import ClassVar
from uuid import uuid4

from pivot.models.event import CorrelationKey, Event, EventMetadata, Level
from pivot.normalizer.base import BaseDialect, DialectRegistry

SOURCE = "text-log"

TIMESTAMP_PATTERN = re.compile(
    r"(?P<iso>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?)"
    r"|(?P<syslog>\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) {1,2}\d{1,2} \d{2}:\d{2}:\d{2})"
)

LEVEL_PATTERN = re.compile(
    r"\b(INFO|WARN(?:ING)?|ERROR|DEBUG|CRITICAL|FATAL)\b",
    re.IGNORECASE,
)

IPV4_PATTERN = re.compile(r"\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b")

KEY_VALUE_PATTERN = re.compile(
    r"\b(?P<key>user(?:_?id)?|device(?:_?id)?|session(?:_?id)?)=(?P<value>[^\s,;\"']+)",
    re.IGNORECASE,
)

KEY_PREFIXES = {
    "user": CorrelationKey.USER_ID,
    "device": CorrelationKey.DEVICE_ID,
    "session": CorrelationKey.SESSION_ID,
}

_EMPTY_BRACKETS = re.compile(r"\[\s*\]|\(\s*\)")
_LEADING_SEPARATORS = re.compile(r"^[\s\-:|]+")


def parse_timestamp(match: re.Match[str], now: datetime) -> datetime:
    """Convert a timestamp match to an aware UTC datetime.

    Syslog stamps carry no year; the year of ``now`` is assumed.
    Unparseable values fall back to ``now``.
    """
    try:
        if match.group("iso"):
            ts = datetime.fromisoformat(match.group("iso"))
        else:
            ts = datetime.strptime(f"{now.year} {match.group('syslog')}", "%Y %b %d %H:%M:%S")
    except ValueError:
        return now

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def _cut(text: str, start: int, end: int) -> str:
    """Remove text[start:end] and join the remainder with a single space."""
    return f"{text[:start].rstrip()} {text[end:].lstrip()}".strip()


def parse_line(line: str, now: datetime | None = None) -> Event:
    """Build a best-effort Event from one raw log line.

    Never raises for line content.

    Args:
        line: Raw log line
        now: Fallback time when the line carries no timestamp

    Returns:
        Event with a fresh id and source ``text-log``
    """
    if now is None:
        now = datetime.now(UTC)

    message = line.strip()

    timestamp = now
    ts_match = TIMESTAMP_PATTERN.search(message)
    if ts_match:
        timestamp = parse_timestamp(ts_match, now)
        message = _cut(message, ts_match.start(), ts_match.end())

    level = Level.INFO
    level_match = LEVEL_PATTERN.search(message)
    if level_match:
        level = Level.from_text(level_match.group(1))
        message = _cut(message, level_match.start(), level_match.end())

    message = _EMPTY_BRACKETS.sub("", message)
    message = _LEADING_SEPARATORS.sub("", message).strip()

    return Event(
        id=str(uuid4()),
        timestamp=timestamp,
        level=level,
        source=SOURCE,
        message=message,
        metadata=extract_metadata(line),
    )


def extract_metadata(line: str) -> EventMetadata:
    """Scan a line for correlation keys."""
    values: dict[str, str] = {}

    ip_match = IPV4_PATTERN.search(line)
    if ip_match:
        values[CorrelationKey.IP.value] = ip_match.group(0)

    for match in KEY_VALUE_PATTERN.finditer(line):
        key_name = match.group("key").lower()
        for prefix, key in KEY_PREFIXES.items():
            if key_name.startswith(prefix):
                values.setdefault(key.value, match.group("value"))
                break

    return EventMetadata.model_validate(values)


@DialectRegistry.register
class TextLogDialect(BaseDialect):
    """Lenient line-oriented dialect for anything that is not JSON."""

    name: ClassVar[str] = "text"
    extensions: ClassVar[list[str]] = []

    def parse(self, file_path: Path) -> Iterator[Event]:
        """Parse a text log, one event per non-blank line."""
        with self.open_text(file_path, errors="replace") as f:
            for line in f:
                if not line.strip():
                    continue
                yield parse_line(line)
