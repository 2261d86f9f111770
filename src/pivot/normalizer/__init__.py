"""Normalization layer turning raw log files into Events.

Dialects are selected by file extension:
- JsonArrayDialect: ``.json`` arrays of structured events (strict)
- TextLogDialect: any other file, one event per line (lenient)
"""

from pivot.normalizer.base import BaseDialect, DialectRegistry
from pivot.normalizer.json_array import JsonArrayDialect, JsonArrayReader
from pivot.normalizer.stream import EventNormalizer, load_events
from pivot.normalizer.text_log import TextLogDialect, parse_line

__all__ = [
    "BaseDialect",
    "DialectRegistry",
    "EventNormalizer",
    "JsonArrayDialect",
    "JsonArrayReader",
    "TextLogDialect",
    "load_events",
    "parse_line",
]
