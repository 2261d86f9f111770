"""Timeline models for Pivot."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pivot.models.event import Event

CRITICAL_TAG = "CRITICAL"
CLUSTER_TAG_PREFIX = "Cluster:"


class TimelineEvent(Event):
    """An Event placed on a timeline with its correlation context."""

    related_events: list[str] = Field(
        default_factory=list,
        description="Ids of other events in the same correlation cluster",
    )

    tags: list[str] = Field(
        default_factory=list,
        description="Cluster marker and severity markers",
    )

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @classmethod
    def from_event(
        cls,
        event: Event,
        related_events: list[str],
        tags: list[str],
    ) -> "TimelineEvent":
        """Wrap an Event with its correlation results."""
        return cls(
            id=event.id,
            timestamp=event.timestamp,
            level=event.level,
            source=event.source,
            message=event.message,
            metadata=event.metadata,
            related_events=related_events,
            tags=tags,
        )

    @property
    def cluster(self) -> str | None:
        """Cluster marker tag, if assigned."""
        for tag in self.tags:
            if tag.startswith(CLUSTER_TAG_PREFIX):
                return tag
        return None


class Timeline(BaseModel):
    """Ordered, correlated view of one batch of events."""

    id: str = Field(
        ...,
        description="Unique timeline identifier",
    )

    title: str = Field(
        ...,
        description="Human-readable title",
    )

    start_time: str = Field(
        default="",
        description="Timestamp of the earliest event (empty when no events)",
    )

    end_time: str = Field(
        default="",
        description="Timestamp of the latest event (empty when no events)",
    )

    events: list[TimelineEvent] = Field(
        default_factory=list,
        description="Events in ascending timestamp order",
    )

    summary: str | None = Field(
        default=None,
        description="Templated summary text",
    )

    findings: list[str] = Field(
        default_factory=list,
        description="Finding text for every rule that fired",
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @property
    def is_empty(self) -> bool:
        return not self.events

    def to_dict(self) -> dict:
        """Convert to the external camelCase JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
