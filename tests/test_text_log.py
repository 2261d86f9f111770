from datetime import UTC, datetime

from pivot.models.event import Level
from pivot.normalizer import TextLogDialect, load_events, parse_line

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


def test_iso_line_with_level_and_ip():
    event = parse_line("2023-01-01T10:00:00Z ERROR Failed login from 1.2.3.4")
    assert event.level == Level.ERROR
    assert event.metadata.ip == "1.2.3.4"
    assert event.message == "Failed login from 1.2.3.4"
    assert event.timestamp == datetime(2023, 1, 1, 10, 0, 0, tzinfo=UTC)
    assert event.source == "text-log"


def test_fractional_seconds_and_separator():
    event = parse_line("2023-01-01T10:00:00.123Z - WARN: disk almost full")
    assert event.level == Level.WARN
    assert event.message == "disk almost full"
    assert event.timestamp.microsecond == 123000


def test_syslog_timestamp_uses_current_year():
    event = parse_line("Mar  5 08:15:02 host sshd[311]: Accepted password", now=NOW)
    assert event.timestamp == datetime(2024, 3, 5, 8, 15, 2, tzinfo=UTC)
    assert event.message == "host sshd[311]: Accepted password"
    assert event.level == Level.INFO


def test_missing_timestamp_falls_back_to_now():
    event = parse_line("something happened", now=NOW)
    assert event.timestamp == NOW
    assert event.level == Level.INFO
    assert event.message == "something happened"


def test_unparseable_timestamp_falls_back_to_now():
    event = parse_line("2023-13-45T99:99:99Z INFO broken clock", now=NOW)
    assert event.timestamp == NOW
    assert event.message == "broken clock"


def test_bracketed_level_and_aliases():
    event = parse_line("[2023-01-01 10:00:00] [critical] kernel panic", now=NOW)
    assert event.level == Level.ERROR
    assert event.message == "kernel panic"

    event = parse_line("warning: low memory", now=NOW)
    assert event.level == Level.WARN
    assert event.message == "low memory"


def test_level_matches_whole_words_only():
    event = parse_line("AuthError for user bob", now=NOW)
    assert event.level == Level.INFO
    assert event.message == "AuthError for user bob"

    event = parse_line("information only, then an error occurred", now=NOW)
    assert event.level == Level.ERROR


def test_key_value_correlation_tokens():
    event = parse_line("login ok user=alice session_id=s-9 deviceId=d1 from 10.0.0.7")
    assert event.metadata.user_id == "alice"
    assert event.metadata.session_id == "s-9"
    assert event.metadata.device_id == "d1"
    assert event.metadata.ip == "10.0.0.7"


def test_garbage_line_never_raises():
    event = parse_line("\x00\x01 ::: ---- ]]] ((", now=NOW)
    assert event.timestamp == NOW
    assert event.id


def test_ids_are_unique():
    ids = {parse_line("same line").id for _ in range(50)}
    assert len(ids) == 50


def test_dialect_skips_blank_lines(write_log):
    path = write_log(
        "app.log",
        "2023-01-01T10:00:00Z INFO start\n\n   \n2023-01-01T10:00:01Z ERROR stop\n",
    )
    events = list(TextLogDialect().parse(path))
    assert [e.message for e in events] == ["start", "stop"]


def test_undecodable_bytes_are_replaced(tmp_path):
    path = tmp_path / "bin.log"
    path.write_bytes(b"2023-01-01T10:00:00Z INFO caf\xe9 opened\n")
    events = load_events(path)
    assert len(events) == 1
    assert events[0].message.startswith("caf")
