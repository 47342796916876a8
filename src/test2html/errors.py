"""Exception types raised while reading, rendering and writing reports."""

from __future__ import annotations


class Test2HtmlError(Exception):
    """Base class for all test2html errors."""

    pass


class EventReadError(Test2HtmlError):
    """Raised when the event source cannot be opened or read."""

    pass


class EventDecodeError(Test2HtmlError):
    """Raised when an input line is not a valid test event."""

    def __init__(self, line_number: int, message: str):
        self.line_number = line_number
        self.message = message
        super().__init__(f"line {line_number}: {message}")


class RenderError(Test2HtmlError):
    """Raised when a report cannot be rendered."""

    pass


class ReportWriteError(Test2HtmlError):
    """Raised when the report file cannot be created or written."""

    pass


class ConfigValidationError(Test2HtmlError):
    """Raised when configuration validation fails."""

    pass


class ConfigLoadError(Test2HtmlError):
    """Raised when configuration file cannot be loaded."""

    pass
