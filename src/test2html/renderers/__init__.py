"""Renderers for aggregated test reports."""

from test2html.models.report import Report
from test2html.renderers.base import OutputFormat, ReportRenderer
from test2html.renderers.html import HTMLRenderer
from test2html.renderers.json_renderer import JSONRenderer
from test2html.renderers.text import TextRenderer


def get_renderer(format: OutputFormat | str) -> ReportRenderer:
    """Return a renderer for the given output format."""
    format = OutputFormat(format)
    if format == OutputFormat.JSON:
        return JSONRenderer()
    elif format == OutputFormat.TEXT:
        return TextRenderer()
    return HTMLRenderer()


def render_report(report: Report, *, format: OutputFormat | str = OutputFormat.HTML, **options) -> str:
    """Render a Report to the specified format.

    Args:
        report: The aggregated report
        format: Output format (HTML, JSON or TEXT)
        **options: Format-specific options

    Returns:
        Rendered document
    """
    return get_renderer(format).render(report, **options)


__all__ = [
    "OutputFormat",
    "ReportRenderer",
    "HTMLRenderer",
    "JSONRenderer",
    "TextRenderer",
    "get_renderer",
    "render_report",
]
