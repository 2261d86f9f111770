import json
from datetime import UTC, datetime, timedelta

import pytest

from pivot.models.event import Event

BASE_TIME = datetime(2023, 1, 1, 10, 0, 0, tzinfo=UTC)


def make_event(event_id, seconds=0, message="event", level="INFO", **metadata):
    return Event(
        id=str(event_id),
        timestamp=BASE_TIME + timedelta(seconds=seconds),
        level=level,
        source="test",
        message=message,
        metadata=metadata,
    )


@pytest.fixture
def write_log(tmp_path):
    """Write content (str, or a list dumped as JSON) to a file under tmp_path."""

    def _write(name, content):
        path = tmp_path / name
        if not isinstance(content, str):
            content = json.dumps(content)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def brute_force_records():
    """Four failed logins from one ip, one second apart."""
    return [
        {
            "id": str(i),
            "timestamp": f"2023-01-01T10:00:0{i}Z",
            "level": "WARN",
            "source": "auth",
            "message": f"Failed login attempt {i} for admin",
            "metadata": {"ip": "1.2.3.4"},
        }
        for i in range(1, 5)
    ]


@pytest.fixture
def new_event():
    """Factory for Events at BASE_TIME + seconds."""
    return make_event
