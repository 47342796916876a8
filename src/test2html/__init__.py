"""test2html - HTML reports from ``go test -json`` event streams.

Public API:
    - read_events: text stream → list[TestEvent]
    - aggregate_events: list[TestEvent] → Report
    - render_report: Report → str (HTML, JSON or text)
    - generate_report: event file → written report (all-in-one)

Example:
    from test2html import generate_report

    generate_report(Path("events.json"), Path("report.html"), title="CI run")

    # Step by step
    from test2html import read_events, aggregate_events, render_report

    with open("events.json") as f:
        events = read_events(f)
    report = aggregate_events(events, title="CI run")
    html = render_report(report)
"""

from pathlib import Path

from test2html.aggregation import DEFAULT_TITLE, EventAggregator, aggregate_events
from test2html.events import Action, TestEvent, read_events, read_events_from_path
from test2html.models import PackageNode, Report, Summary, TestNode, TestStatus
from test2html.output import write_report
from test2html.renderers import OutputFormat, render_report

__version__ = "0.1.0"


def generate_report(
    input_path: Path,
    output_path: Path,
    *,
    title: str = DEFAULT_TITLE,
    format: OutputFormat | str = OutputFormat.HTML,
    **options,
) -> Report:
    """All-in-one function to turn an event file into a report file.

    Nothing is written unless reading, aggregation and rendering all
    succeed.

    Args:
        input_path: File of newline-delimited JSON events
        output_path: Destination of the rendered report
        title: Report title
        format: Output format
        **options: Renderer options

    Returns:
        The aggregated Report
    """
    events = read_events_from_path(input_path)
    report = aggregate_events(events, title=title)
    write_report(render_report(report, format=format, **options), output_path)
    return report


__all__ = [
    "__version__",
    # Models
    "Action",
    "TestEvent",
    "PackageNode",
    "Report",
    "Summary",
    "TestNode",
    "TestStatus",
    # Configuration
    "DEFAULT_TITLE",
    "OutputFormat",
    # Core functions
    "EventAggregator",
    "read_events",
    "read_events_from_path",
    "aggregate_events",
    "render_report",
    "write_report",
    "generate_report",
]
