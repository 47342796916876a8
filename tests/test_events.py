"""Tests for event decoding and the line reader."""

import io
from datetime import datetime, timezone
from pathlib import Path

import pytest

from test2html.errors import EventDecodeError, EventReadError
from test2html.events import (
    Action,
    TestEvent,
    decode_event,
    iter_events,
    read_events,
    read_events_from_path,
)
from test2html.events.model import parse_timestamp

FIXTURES = Path(__file__).parent / "fixtures"


# -----------------------------------------------------------------------------
# Model Tests
# -----------------------------------------------------------------------------


class TestTestEvent:
    """Tests for the TestEvent model."""

    def test_decodes_go_field_names(self):
        event = decode_event(
            '{"Time":"2024-03-01T10:00:00Z","Action":"pass","Package":"pkg",'
            '"Test":"TestA","Elapsed":0.5}'
        )
        assert event.action == "pass"
        assert event.package == "pkg"
        assert event.test == "TestA"
        assert event.elapsed == 0.5
        assert event.output == ""

    def test_missing_fields_default(self):
        """Only the JSON object shape is required."""
        event = decode_event("{}")
        assert event.time is None
        assert event.action == ""
        assert event.package == ""
        assert event.elapsed == 0.0

    def test_null_fields_read_as_absent(self):
        event = decode_event(
            '{"Action":"output","Package":"p","Test":null,"Output":null,"Elapsed":null}'
        )
        assert event.test == ""
        assert event.output == ""
        assert event.elapsed == 0.0
        assert event.is_package_event

    def test_null_test_is_package_scoped(self):
        events = read_events(io.StringIO(
            '{"Action":"run","Package":"p","Test":null}\n'
            '{"Action":"pass","Package":"p","Test":"TestA"}\n'
        ))
        assert [e.is_package_event for e in events] == [True, False]

    def test_package_event(self):
        assert TestEvent(action="pass", package="pkg").is_package_event
        assert not TestEvent(action="pass", package="pkg", test="TestA").is_package_event

    def test_no_test_files_detection(self):
        event = TestEvent(
            action="output",
            package="example.com/empty",
            output="?\texample.com/empty\t[no test files]\n",
        )
        assert event.is_no_test_files

    def test_no_test_files_requires_exact_package(self):
        event = TestEvent(
            action="output",
            package="example.com/other",
            output="?\texample.com/empty\t[no test files]\n",
        )
        assert not event.is_no_test_files

    def test_events_are_immutable(self):
        event = TestEvent(action="run", test="TestA")
        with pytest.raises(Exception):
            event.action = "pass"

    def test_action_values(self):
        assert Action("run") == Action.RUN
        assert Action.FAIL.value == "fail"


class TestParseTimestamp:
    """Tests for RFC 3339 timestamp parsing."""

    def test_utc_suffix(self):
        parsed = parse_timestamp("2024-03-01T10:00:00Z")
        assert parsed == datetime(2024, 3, 1, 10, 0, 0, tzinfo=timezone.utc)

    def test_nanosecond_precision_is_truncated(self):
        parsed = parse_timestamp("2024-03-01T10:00:00.123456789Z")
        assert parsed.microsecond == 123456

    def test_short_fraction(self):
        parsed = parse_timestamp("2024-03-01T10:00:00.5Z")
        assert parsed.microsecond == 500000

    def test_offset_preserved(self):
        parsed = parse_timestamp("2024-03-01T12:00:00+02:00")
        assert parsed == datetime(2024, 3, 1, 10, 0, 0, tzinfo=timezone.utc)

    def test_invalid_falls_back_to_now(self):
        before = datetime.now(timezone.utc)
        parsed = parse_timestamp("not a time")
        assert parsed >= before

    def test_missing_falls_back_to_now(self):
        assert parse_timestamp(None).tzinfo is not None


# -----------------------------------------------------------------------------
# Reader Tests
# -----------------------------------------------------------------------------


class TestReader:
    """Tests for reading event streams."""

    def test_preserves_input_order(self):
        stream = io.StringIO(
            '{"Action":"run","Test":"TestA"}\n'
            '{"Action":"run","Test":"TestB"}\n'
            '{"Action":"pass","Test":"TestA"}\n'
        )
        events = read_events(stream)
        assert [(e.action, e.test) for e in events] == [
            ("run", "TestA"),
            ("run", "TestB"),
            ("pass", "TestA"),
        ]

    def test_blank_lines_ignored(self):
        events = list(iter_events(["\n", "   \n", '{"Action":"run"}\n', ""]))
        assert len(events) == 1

    def test_drops_no_test_files_lines(self):
        events = read_events_from_path(FIXTURES / "no_test_files.jsonl")
        assert [e.action for e in events] == ["skip"]

    def test_invalid_line_reports_line_number(self):
        with pytest.raises(EventDecodeError) as exc_info:
            read_events_from_path(FIXTURES / "malformed.jsonl")
        assert exc_info.value.line_number == 2
        assert str(exc_info.value).startswith("line 2:")

    def test_non_object_line_rejected(self):
        with pytest.raises(EventDecodeError):
            read_events(io.StringIO("[1, 2, 3]\n"))

    def test_wrong_field_type_rejected(self):
        with pytest.raises(EventDecodeError) as exc_info:
            decode_event('{"Elapsed": "slow"}', line_number=7)
        assert exc_info.value.line_number == 7
        assert "Elapsed" in exc_info.value.message

    def test_missing_file(self, tmp_path):
        with pytest.raises(EventReadError, match="Error opening input file"):
            read_events_from_path(tmp_path / "missing.jsonl")

    def test_read_failure_wrapped(self):
        class BrokenStream:
            def __iter__(self):
                raise OSError("device went away")

        with pytest.raises(EventReadError, match="device went away"):
            read_events(BrokenStream())

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "events.jsonl"
        path.write_bytes(b'{"Action":"run"}\n\xff\xfe\n')
        with pytest.raises(EventReadError):
            read_events_from_path(path)

    def test_fixture_stream(self, go_test_output):
        events = read_events_from_path(go_test_output)
        # One no-test-files line dropped, one blank line skipped
        assert len(events) == 24
        assert all(not e.is_no_test_files for e in events)

    def test_logs_event_count(self, caplog):
        import logging

        with caplog.at_level(logging.INFO, logger="test2html.events.reader"):
            read_events(io.StringIO('{"Action":"run","Test":"TestA"}\n'))
        assert "Decoded 1 events" in caplog.text
