"""Line-oriented reader for newline-delimited JSON test events."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, TextIO

from pydantic import ValidationError

from test2html.errors import EventDecodeError, EventReadError
from test2html.events.model import TestEvent

logger = logging.getLogger(__name__)


def _describe(error: ValidationError) -> str:
    """Condense a pydantic error into a single line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(loc) for loc in item.get("loc", ()))
        parts.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(parts) or str(error)


def decode_event(line: str, line_number: int = 0) -> TestEvent:
    """Decode one JSON line into a TestEvent.

    Raises:
        EventDecodeError: If the line is not a JSON object of the event shape
    """
    try:
        return TestEvent.model_validate_json(line)
    except ValidationError as e:
        raise EventDecodeError(line_number, _describe(e)) from e


def iter_events(lines: Iterable[str]) -> Iterator[TestEvent]:
    """Yield events from an iterable of lines, in order.

    Blank lines are skipped and ``[no test files]`` output events are
    dropped. Decoding stops at the first invalid line.
    """
    decoded = 0
    dropped = 0

    try:
        for line_number, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line:
                continue

            event = decode_event(line, line_number)
            if event.is_no_test_files:
                dropped += 1
                continue

            decoded += 1
            yield event
    except (OSError, UnicodeDecodeError) as e:
        raise EventReadError(f"Error scanning input: {e}") from e

    logger.info("Decoded %d events (%d no-test-files lines dropped)", decoded, dropped)


def read_events(stream: TextIO) -> list[TestEvent]:
    """Read every event from an open text stream."""
    return list(iter_events(stream))


def read_events_from_path(path: Path) -> list[TestEvent]:
    """Read every event from a file.

    Raises:
        EventReadError: If the file cannot be opened or read
        EventDecodeError: If any line is not a valid event
    """
    try:
        with path.open(encoding="utf-8") as f:
            return read_events(f)
    except OSError as e:
        raise EventReadError(f"Error opening input file {path}: {e}") from e
