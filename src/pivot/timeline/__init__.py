"""Timeline assembly and incident summaries."""

from pivot.timeline.assembler import (
    EMPTY_TITLE,
    FINDINGS_MARKER,
    TimelineAssembler,
    build_timeline,
    empty_timeline,
)
from pivot.timeline.summary import summarize_incident, summarize_timeline

__all__ = [
    "EMPTY_TITLE",
    "FINDINGS_MARKER",
    "TimelineAssembler",
    "build_timeline",
    "empty_timeline",
    "summarize_incident",
    "summarize_timeline",
]
