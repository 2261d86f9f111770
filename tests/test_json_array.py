import io
import json

import pytest

from pivot.core.config import IngestConfig
from pivot.core.errors import ParseError
from pivot.models.event import Level
from pivot.normalizer import EventNormalizer, JsonArrayReader, load_events


def records(count):
    return [
        {
            "id": f"evt-{i}",
            "timestamp": f"2023-01-01T10:00:{i:02d}Z",
            "level": "info",
            "source": "api",
            "message": f"request {i}",
            "metadata": {"ip": "10.0.0.1", "route": "/v1/items"},
        }
        for i in range(count)
    ]


def test_loads_structured_events(write_log):
    path = write_log("events.json", records(3))
    events = load_events(path)
    assert [e.id for e in events] == ["evt-0", "evt-1", "evt-2"]
    assert events[0].level == Level.INFO
    assert events[0].metadata.ip == "10.0.0.1"
    assert events[0].metadata.extra == {"route": "/v1/items"}


def test_small_chunks_decode_across_boundaries(write_log):
    path = write_log("events.json", json.dumps(records(20), indent=2))
    config = IngestConfig(chunk_size=16)
    events = list(EventNormalizer(config).stream(path))
    assert len(events) == 20
    assert events[-1].message == "request 19"


def test_reader_pulls_incrementally():
    content = json.dumps(records(50))
    stream = io.StringIO(content)
    reader = iter(JsonArrayReader(stream, "mem.json", chunk_size=64))
    first = next(reader)
    assert first["id"] == "evt-0"
    assert stream.tell() < len(content)


def test_reader_yields_numbers_split_across_chunks():
    stream = io.StringIO("[12345, 678]")
    assert list(JsonArrayReader(stream, "mem.json", chunk_size=3)) == [12345, 678]


def test_defaults_for_optional_fields(write_log):
    path = write_log("events.json", [{"id": 7, "timestamp": "2023-01-01T10:00:00Z"}])
    (event,) = load_events(path)
    assert event.id == "7"
    assert event.source == "json-log"
    assert event.level == Level.INFO
    assert event.message == ""


def test_empty_array_and_blank_file(write_log):
    assert load_events(write_log("a.json", "[]")) == []
    assert load_events(write_log("b.json", "  \n")) == []


@pytest.mark.parametrize(
    "content",
    [
        '{"id": "1"}',
        '[{"id": "1", "timestamp": "2023-01-01T10:00:00Z"}',
        '[{"id": "1", "timestamp": "2023-01-01T10:00:00Z"},]',
        '[{"id": "1", "timestamp": "2023-01-01T10:00:00Z"}] trailing',
        '[{"id": "1" "timestamp": "2023-01-01T10:00:00Z"}]',
        '["just a string"]',
        '[{"timestamp": "2023-01-01T10:00:00Z"}]',
        '[{"id": "1", "timestamp": "not a time"}]',
        '[{"id": "1", "timestamp": "2023-01-01T10:00:00Z", "level": "LOUD"}]',
    ],
)
def test_malformed_json_is_fatal(write_log, content):
    path = write_log("bad.json", content)
    with pytest.raises(ParseError) as exc_info:
        load_events(path)
    assert exc_info.value.code == "MALFORMED_JSON"
    assert exc_info.value.error.context["path"] == str(path)


def test_duplicate_ids_rejected(write_log):
    data = records(2)
    data[1]["id"] = data[0]["id"]
    with pytest.raises(ParseError, match="duplicate event id"):
        load_events(write_log("dup.json", data))


def test_error_after_valid_elements_surfaces_lazily(write_log):
    content = json.dumps(records(2))[:-1] + ', {"id": "x", '
    path = write_log("tail.json", content)
    stream = EventNormalizer().stream(path)
    assert next(stream).id == "evt-0"
    assert next(stream).id == "evt-1"
    with pytest.raises(ParseError) as exc_info:
        next(stream)
    assert exc_info.value.error.context["index"] == 2


def test_metadata_key_named_extra_is_kept(write_log):
    path = write_log(
        "events.json",
        [
            {
                "id": "1",
                "timestamp": "2023-01-01T10:00:00Z",
                "metadata": {"ip": "1.2.3.4", "extra": "note"},
            },
            {
                "id": "2",
                "timestamp": "2023-01-01T10:00:01Z",
                "metadata": {"ip": "1.2.3.4", "route": "/x", "extra": {"a": 1}},
            },
        ],
    )
    first, second = load_events(path)
    assert first.metadata.extra == {"extra": "note"}
    assert second.metadata.ip == "1.2.3.4"
    assert second.metadata.extra == {"route": "/x", "extra": {"a": 1}}
    assert second.metadata.model_dump() == {
        "ip": "1.2.3.4",
        "route": "/x",
        "extra": {"a": 1},
    }


def test_early_syntax_error_stops_reading():
    content = '[{"id": "0" "timestamp": 1}, ' + json.dumps(records(2000))[1:]
    stream = io.StringIO(content)
    with pytest.raises(ParseError) as exc_info:
        list(JsonArrayReader(stream, "mem.json", chunk_size=64))
    assert exc_info.value.error.context["index"] == 0
    assert stream.tell() <= 128


def test_truncated_escape_across_chunks_is_decoded():
    stream = io.StringIO('["\\ud83d\\ude00 ok", "caf\\u00e9"]')
    assert list(JsonArrayReader(stream, "mem.json", chunk_size=5)) == ["\U0001f600 ok", "café"]
