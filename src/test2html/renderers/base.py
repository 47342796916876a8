"""Base renderer and output format definitions."""

from enum import Enum
from typing import Protocol

from test2html.models.report import Report


class OutputFormat(str, Enum):
    """Output format for rendering."""

    HTML = "html"
    JSON = "json"
    TEXT = "text"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


class ReportRenderer(Protocol):
    """Protocol for report renderers."""

    format: OutputFormat

    def render(self, report: Report, **options) -> str:
        """Render the report to the target format.

        Args:
            report: The aggregated report
            **options: Additional format-specific options

        Returns:
            Rendered document
        """
        ...
