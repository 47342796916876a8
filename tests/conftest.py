"""Pytest configuration and shared fixtures for test2html tests."""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from test2html.events import TestEvent

FIXTURES = Path(__file__).parent / "fixtures"

BASE_TIME = datetime(2024, 3, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path, monkeypatch):
    """Run every test from tmp_path with no user or env config leaking in."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in ("TEST2HTML_TITLE", "TEST2HTML_OUTPUT", "TEST2HTML_FORMAT",
                 "TEST2HTML_QUIET", "TEST2HTML_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_event():
    """Factory for TestEvents with strictly increasing timestamps.

    Usage:
        make_event("run", "TestA")
        make_event("pass", "TestA", elapsed=0.01)
    """
    counter = {"n": 0}

    def _make(
        action,
        test="",
        *,
        package="example.com/pkg",
        elapsed=0.0,
        output="",
        time=None,
    ):
        if time is None:
            time = (BASE_TIME + timedelta(milliseconds=counter["n"])).isoformat()
            counter["n"] += 1
        return TestEvent(
            time=time,
            action=action,
            package=package,
            test=test,
            output=output,
            elapsed=elapsed,
        )

    return _make


@pytest.fixture
def go_test_output():
    """Path to a realistic multi-package event stream."""
    return FIXTURES / "go_test_output.jsonl"


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo the level set by ``main --log-level``."""
    package_logger = logging.getLogger("test2html")
    level = package_logger.level
    yield
    package_logger.setLevel(level)
