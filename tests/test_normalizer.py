import itertools
import types
from pathlib import Path

import pytest

from pivot.core.config import IngestConfig
from pivot.core.errors import (
    EventLimitExceededError,
    InputNotFoundError,
    InputUnreadableError,
    ReadTimeoutError,
)
from pivot.normalizer import DialectRegistry, EventNormalizer, JsonArrayDialect, TextLogDialect
from pivot.normalizer import stream as stream_module


def test_dialect_selected_by_extension():
    assert DialectRegistry.for_path(Path("a.json")) is JsonArrayDialect
    assert DialectRegistry.for_path(Path("A.JSON")) is JsonArrayDialect
    assert DialectRegistry.for_path(Path("a.log")) is TextLogDialect
    assert DialectRegistry.for_path(Path("noext")) is TextLogDialect
    assert ".json" in DialectRegistry.supported_extensions()


def test_missing_file_raises_immediately(tmp_path):
    with pytest.raises(InputNotFoundError) as exc_info:
        EventNormalizer().stream(tmp_path / "nope.log")
    assert exc_info.value.code == "INPUT_NOT_FOUND"


def test_directory_is_unreadable(tmp_path):
    with pytest.raises(InputUnreadableError):
        EventNormalizer().stream(tmp_path)


def test_stream_is_lazy_generator(write_log):
    path = write_log("app.log", "INFO a\nINFO b\n")
    events = EventNormalizer().stream(path)
    assert isinstance(events, types.GeneratorType)
    assert [e.message for e in events] == ["a", "b"]
    assert list(events) == []


def test_max_events_guard(write_log):
    path = write_log("app.log", "line\n" * 5)
    normalizer = EventNormalizer(IngestConfig(max_events=4))
    with pytest.raises(EventLimitExceededError) as exc_info:
        list(normalizer.stream(path))
    assert exc_info.value.code == "RESOURCE_EXHAUSTED"

    assert len(list(EventNormalizer(IngestConfig(max_events=5)).stream(path))) == 5


def test_read_timeout_guard(write_log, monkeypatch):
    path = write_log("app.log", "line\n" * 3)
    clock = itertools.count(0, 100)
    monkeypatch.setattr(stream_module, "time", types.SimpleNamespace(monotonic=lambda: next(clock)))

    normalizer = EventNormalizer(IngestConfig(read_timeout_seconds=5))
    with pytest.raises(ReadTimeoutError):
        list(normalizer.stream(path))


def test_guards_can_be_disabled(write_log):
    path = write_log("app.log", "line\n" * 3)
    config = IngestConfig(max_events=None, read_timeout_seconds=None)
    assert len(list(EventNormalizer(config).stream(path))) == 3
