"""test2html CLI - render go test JSON output as an HTML report."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from test2html import __version__
from test2html.aggregation import aggregate_events
from test2html.config import (
    VALID_FORMATS,
    Test2HtmlConfig,
    generate_config_template_string,
    get_config,
    get_project_config_path,
)
from test2html.errors import (
    ConfigLoadError,
    ConfigValidationError,
    EventDecodeError,
    EventReadError,
    RenderError,
    ReportWriteError,
)
from test2html.events import TestEvent, read_events, read_events_from_path
from test2html.models import Report
from test2html.output import write_report
from test2html.renderers import TextRenderer, render_report

logger = logging.getLogger(__name__)

console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _fail(message: str, error: Exception | None = None) -> None:
    """Print an error to stderr and exit with status 1."""
    if error is not None:
        err_console.print(f"[red]Error:[/red] {message}: {escape(str(error))}")
    else:
        err_console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)


def _load_config(ctx: click.Context) -> Test2HtmlConfig:
    """Resolve the effective configuration, exiting on errors."""
    try:
        return get_config(ctx.obj.get("config_path"))
    except (ConfigLoadError, ConfigValidationError) as e:
        _fail("Invalid configuration", e)


def _read_input(input_path: Path | None) -> list[TestEvent]:
    """Read events from a file, or stdin when no path (or ``-``) is given."""
    try:
        if input_path is None or str(input_path) == "-":
            logger.info("Reading events from stdin")
            return read_events(click.get_text_stream("stdin"))
        logger.info("Reading events from %s", input_path)
        return read_events_from_path(input_path)
    except EventReadError as e:
        _fail("Error reading input", e)
    except EventDecodeError as e:
        _fail("Error parsing JSON", e)


def _print_summary(report: Report) -> None:
    summary = report.summary
    failed_style = "red" if summary.failed else "dim"
    console.print(
        f"  {summary.total} tests: [green]{summary.passed} passed[/green], "
        f"[{failed_style}]{summary.failed} failed[/{failed_style}], "
        f"{summary.skipped} skipped in {Report.format_duration(report.duration)} "
        f"across {len(report.packages)} package(s)"
    )


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="TEST2HTML_LOG_LEVEL",
    help="Logging verbosity (logs go to stderr)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Project config file (default: ./.test2html.json)",
)
@click.pass_context
def main(ctx: click.Context, log_level: str, quiet: bool, config_path: Path | None) -> None:
    """test2html - Go test JSON to HTML report generator.

    Feed it the output of `go test -json ./...` and get a single
    self-contained HTML page with per-package results.
    """
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("test2html").setLevel(getattr(logging, log_level.upper()))

    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path


@main.command()
def version() -> None:
    """Show version."""
    console.print(f"test2html {__version__}")


@main.command()
@click.option(
    "--input", "-i", "input_path",
    type=click.Path(path_type=Path, dir_okay=False, allow_dash=True),
    default=None,
    help="JSON input file (defaults to stdin if not specified)",
)
@click.option(
    "--output", "-o", "output_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Report output file [default: test-report.html]",
)
@click.option("--title", "-t", default=None, help="Report title [default: Go Test Report]")
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(VALID_FORMATS, case_sensitive=False),
    default=None,
    help="Output format [default: html]",
)
@click.pass_context
def generate(
    ctx: click.Context,
    input_path: Path | None,
    output_path: Path | None,
    title: str | None,
    output_format: str | None,
) -> None:
    """Generate a report from go test JSON events.

    Nothing is written if the input cannot be read or parsed.
    """
    config = _load_config(ctx)
    defaults = config.defaults
    quiet = ctx.obj.get("quiet") or defaults.quiet

    title = title if title is not None else defaults.title
    output_path = output_path or Path(defaults.output)
    output_format = (output_format or defaults.format).lower()

    events = _read_input(input_path)
    report = aggregate_events(events, title=title)

    try:
        content = render_report(report, format=output_format)
    except RenderError as e:
        _fail("Error generating report", e)

    try:
        write_report(content, output_path)
    except ReportWriteError as e:
        _fail("Error writing report", e)

    console.print(f"Test report generated at {escape(str(output_path))}")
    if not quiet:
        _print_summary(report)


@main.command()
@click.option(
    "--input", "-i", "input_path",
    type=click.Path(path_type=Path, dir_okay=False, allow_dash=True),
    default=None,
    help="JSON input file (defaults to stdin if not specified)",
)
@click.option("--title", "-t", default=None, help="Tree root label")
@click.option("--depth", "-d", type=int, default=None, help="Maximum subtest depth to show")
@click.option("--failed-only", is_flag=True, help="Only show failed tests")
@click.pass_context
def summary(
    ctx: click.Context,
    input_path: Path | None,
    title: str | None,
    depth: int | None,
    failed_only: bool,
) -> None:
    """Print the aggregated test tree to the terminal.

    Exits with status 1 when any test failed.
    """
    config = _load_config(ctx)

    events = _read_input(input_path)
    report = aggregate_events(events, title=title if title is not None else config.defaults.title)

    renderer = TextRenderer()
    console.print(renderer.build_tree(report, depth=depth, failed_only=failed_only))
    _print_summary(report)

    if report.summary.has_failures:
        raise SystemExit(1)


@main.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration as JSON."""
    effective = _load_config(ctx)
    console.print(json.dumps(effective.to_dict(), indent=2), markup=False)


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing config file")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Create a project config file with the default values."""
    config_path = ctx.obj.get("config_path") or get_project_config_path()

    if config_path.exists() and not force:
        err_console.print(f"[red]Error:[/red] Config file already exists: {escape(str(config_path))}")
        err_console.print("Use --force to overwrite")
        raise SystemExit(1)

    try:
        config_path.write_text(generate_config_template_string() + "\n")
    except OSError as e:
        _fail("Error writing config file", e)

    console.print(f"[green]Created config file:[/green] {escape(str(config_path))}")


if __name__ == "__main__":
    main()
