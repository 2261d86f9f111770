"""Event and metadata models for Pivot."""

from collections.abc import Iterator
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel


class Level(str, Enum):
    """Normalized event severity."""

    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    DEBUG = "DEBUG"

    @classmethod
    def from_text(cls, value: str) -> "Level":
        """Map a raw level token (any case, common aliases) onto a Level.

        Raises:
            ValueError: If the token is not a known level
        """
        token = value.strip().upper()
        if token in LEVEL_ALIASES:
            return LEVEL_ALIASES[token]
        return cls(token)


LEVEL_ALIASES = {
    "WARNING": Level.WARN,
    "CRITICAL": Level.ERROR,
    "FATAL": Level.ERROR,
}


class CorrelationKey(str, Enum):
    """Metadata keys that link events through shared entities."""

    IP = "ip"
    USER_ID = "userId"
    DEVICE_ID = "deviceId"
    SESSION_ID = "sessionId"


# CorrelationKey -> EventMetadata field name
_WATCHED_FIELDS = {
    CorrelationKey.IP: "ip",
    CorrelationKey.USER_ID: "user_id",
    CorrelationKey.DEVICE_ID: "device_id",
    CorrelationKey.SESSION_ID: "session_id",
}


def format_timestamp(ts: datetime) -> str:
    """Render a timestamp as ISO-8601 with a Z suffix for UTC."""
    return ts.isoformat().replace("+00:00", "Z")


class EventMetadata(BaseModel):
    """Event attributes split into watched correlation keys and extras.

    Accepts and emits a single flat mapping such as
    ``{"ip": "1.2.3.4", "userId": "alice", "path": "/login"}``; keys that
    are not correlation keys land in ``extra``.
    """

    ip: str | None = None
    user_id: str | None = None
    device_id: str | None = None
    session_id: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def split_extra(cls, data: Any) -> Any:
        """Move non-correlation keys into the extra bag."""
        if data is None:
            return {}
        if not isinstance(data, dict):
            return data

        known = {key.value for key in CorrelationKey} | set(_WATCHED_FIELDS.values())
        watched = {k: v for k, v in data.items() if k in known}
        watched["extra"] = {k: v for k, v in data.items() if k not in known}
        return watched

    @field_validator("ip", "user_id", "device_id", "session_id", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> str | None:
        """Coerce watched values to strings; empty values count as absent."""
        if v is None:
            return None
        value = str(v).strip()
        return value or None

    def get(self, key: CorrelationKey) -> str | None:
        """Get the value of a watched key."""
        return getattr(self, _WATCHED_FIELDS[key])

    def watched(self) -> Iterator[tuple[CorrelationKey, str]]:
        """Yield (key, value) for every watched key present."""
        for key in CorrelationKey:
            value = self.get(key)
            if value is not None:
                yield key, value

    @model_serializer
    def to_flat(self) -> dict[str, Any]:
        result: dict[str, Any] = {key.value: value for key, value in self.watched()}
        result.update(self.extra)
        return result


class Event(BaseModel):
    """A normalized log record.

    Immutable once created; ``id`` is unique within one ingestion batch.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Unique identifier within one ingestion batch",
    )

    timestamp: datetime = Field(
        ...,
        description="Event time (timezone-aware, UTC)",
    )

    level: Level = Field(
        default=Level.INFO,
        description="Normalized severity",
    )

    source: str = Field(
        ...,
        description="Producer of the record (e.g., 'text-log')",
    )

    message: str = Field(
        default="",
        description="Log message text",
    )

    metadata: EventMetadata = Field(
        default_factory=EventMetadata,
        description="Correlation keys plus extra attributes",
    )

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Accept numeric ids from JSON producers."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept level names in any case plus common aliases."""
        if v is None:
            return Level.INFO
        if isinstance(v, str):
            return Level.from_text(v)
        return v

    @field_validator("timestamp")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Normalize timestamps to timezone-aware UTC."""
        if v.tzinfo is None:
            v = v.replace(tzinfo=UTC)
        return v.astimezone(UTC)

    @field_serializer("timestamp")
    def serialize_timestamp(self, v: datetime) -> str:
        return format_timestamp(v)
