"""Test event decoding."""

from test2html.events.model import (
    Action,
    TestEvent,
    parse_timestamp,
)
from test2html.events.reader import (
    decode_event,
    iter_events,
    read_events,
    read_events_from_path,
)

__all__ = [
    "Action",
    "TestEvent",
    "parse_timestamp",
    "decode_event",
    "iter_events",
    "read_events",
    "read_events_from_path",
]
