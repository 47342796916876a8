"""Pydantic model for a single ``go test -json`` event."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Action(str, Enum):
    """Event actions understood by the aggregator."""

    RUN = "run"
    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"
    OUTPUT = "output"


# Go emits up to nine fractional digits; datetime only holds six.
_FRACTION_PATTERN = re.compile(r"\.(\d+)")


def parse_timestamp(value: str | None) -> datetime:
    """Parse an RFC 3339 timestamp, falling back to the current UTC time."""
    if not value:
        return datetime.now(timezone.utc)

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_PATTERN.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return datetime.now(timezone.utc)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class TestEvent(BaseModel):
    """One record of the test event stream.

    Field aliases match the keys written by ``go test -json``. Every field
    is optional; a missing ``Test`` means the event is package-scoped.
    """

    __test__ = False  # keep pytest from collecting this class

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    time: str | None = Field(default=None, alias="Time")
    action: str = Field(default="", alias="Action")
    package: str = Field(default="", alias="Package")
    test: str = Field(default="", alias="Test")
    output: str = Field(default="", alias="Output")
    elapsed: float = Field(default=0.0, alias="Elapsed")

    @field_validator("action", "package", "test", "output", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        # JSON null reads the same as an absent key
        return "" if value is None else value

    @field_validator("elapsed", mode="before")
    @classmethod
    def null_as_zero(cls, value):
        return 0.0 if value is None else value

    @property
    def is_package_event(self) -> bool:
        return not self.test

    @property
    def is_no_test_files(self) -> bool:
        """Check for the ``?   pkg   [no test files]`` output line."""
        return self.output == f"?\t{self.package}\t[no test files]\n"

    def parsed_time(self) -> datetime:
        return parse_timestamp(self.time)
