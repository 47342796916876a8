"""HTML renderer producing a single self-contained report page."""

import logging

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

from test2html.errors import RenderError
from test2html.models.report import Report
from test2html.renderers.base import OutputFormat

logger = logging.getLogger(__name__)

REPORT_TEMPLATE = "report.html.j2"


def format_seconds(seconds: float) -> str:
    """Format a test duration the way ``go test`` prints it."""
    return f"{seconds:.2f}s"


def format_date(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


class HTMLRenderer:
    """Renders a Report as HTML using Jinja2.

    The stylesheet and script are included into the page so the output
    has no external references.
    """

    format = OutputFormat.HTML

    def __init__(self, env: Environment | None = None):
        self.env = env or self._create_environment()

    @staticmethod
    def _create_environment() -> Environment:
        env = Environment(
            loader=PackageLoader("test2html", "templates"),
            autoescape=select_autoescape(["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.filters["seconds"] = format_seconds
        env.filters["human_duration"] = Report.format_duration
        env.filters["date"] = format_date
        return env

    def render(self, report: Report, **options) -> str:
        """Render the report as HTML.

        Args:
            report: The aggregated report
            **options: Extra variables passed through to the template

        Returns:
            HTML document

        Raises:
            RenderError: If the template is missing or fails to render
        """
        try:
            template = self.env.get_template(options.pop("template", REPORT_TEMPLATE))
            html = template.render(report=report, **options)
        except TemplateError as e:
            raise RenderError(f"Failed to render HTML template: {e}") from e

        logger.debug("Rendered %d bytes of HTML", len(html))
        return html
