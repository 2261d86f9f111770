"""Pydantic models for Pivot."""

from pivot.models.error import ErrorCode, StructuredError
from pivot.models.event import CorrelationKey, Event, EventMetadata, Level
from pivot.models.finding import Finding
from pivot.models.metrics import StepMetrics
from pivot.models.timeline import Timeline, TimelineEvent

__all__ = [
    "CorrelationKey",
    "ErrorCode",
    "Event",
    "EventMetadata",
    "Finding",
    "Level",
    "StepMetrics",
    "StructuredError",
    "Timeline",
    "TimelineEvent",
]
