"""Terminal tree renderer using Rich."""

import io

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from test2html.models.report import PackageNode, Report, TestNode
from test2html.models.summary import Summary, TestStatus
from test2html.renderers.base import OutputFormat


class TextRenderer:
    """Renders a Report as a text tree using Rich."""

    format = OutputFormat.TEXT

    # Status symbols and colors
    STATUS_STYLES = {
        TestStatus.PASSED: ("✓", "green"),
        TestStatus.FAILED: ("✗", "red"),
        TestStatus.SKIPPED: ("⊘", "yellow"),
        TestStatus.UNKNOWN: ("○", "dim"),
    }

    def render(
        self,
        report: Report,
        *,
        depth: int | None = None,
        failed_only: bool = False,
        **options,
    ) -> str:
        """Render the report as a tree.

        Args:
            report: The aggregated report
            depth: Maximum test depth to render (None for unlimited)
            failed_only: Only show tests that failed
            **options: Additional options (width, color)

        Returns:
            Text representation of the report
        """
        console = Console(
            force_terminal=options.get("color", False),
            no_color=not options.get("color", False),
            width=options.get("width", 120),
            record=True,
            file=io.StringIO(),
        )
        console.print(self.build_tree(report, depth=depth, failed_only=failed_only))
        console.print(self._summary_line(report.summary, report.duration))

        return console.export_text()

    def build_tree(
        self,
        report: Report,
        *,
        depth: int | None = None,
        failed_only: bool = False,
    ) -> Tree:
        """Build a Rich Tree for the whole report."""
        root = Tree(Text(report.title, style="bold"))

        for pkg in report.sorted_packages():
            if failed_only and not pkg.summary.has_failures:
                continue
            branch = root.add(self._package_label(pkg))
            for test in pkg.root_tests():
                self._add_test(branch, test, depth=depth, failed_only=failed_only, current_depth=0)

        return root

    def _add_test(
        self,
        parent: Tree,
        test: TestNode,
        *,
        depth: int | None,
        failed_only: bool,
        current_depth: int,
    ) -> None:
        if failed_only and not test.failed:
            return

        branch = parent.add(self._test_label(test))

        # Add children if within depth limit
        if depth is None or current_depth < depth:
            for child in test.sorted_children():
                self._add_test(
                    branch,
                    child,
                    depth=depth,
                    failed_only=failed_only,
                    current_depth=current_depth + 1,
                )

    def _package_label(self, pkg: PackageNode) -> Text:
        symbol, color = self.STATUS_STYLES[pkg.status]
        text = Text()
        text.append(f"{symbol} ", style=color)
        text.append(pkg.name, style="bold")
        text.append(f" ({Report.format_duration(pkg.duration)})", style="dim")
        text.append(" [", style="dim")
        text.append(str(pkg.summary.passed), style="green")
        text.append("/", style="dim")
        text.append(str(pkg.summary.failed), style="red" if pkg.summary.failed else "dim")
        if pkg.summary.skipped:
            text.append("/", style="dim")
            text.append(str(pkg.summary.skipped), style="yellow")
        text.append(" tests]", style="dim")
        return text

    def _test_label(self, test: TestNode) -> Text:
        symbol, color = self.STATUS_STYLES[test.status]
        text = Text()
        text.append(f"{symbol} ", style=color)
        text.append(test.short_name)
        if test.duration > 0:
            text.append(f" ({test.duration:.2f}s)", style="dim")
        return text

    def _summary_line(self, summary: Summary, duration: float) -> Text:
        text = Text()
        text.append(f"{summary.total} tests: ", style="bold")
        text.append(f"{summary.passed} passed", style="green")
        text.append(", ")
        text.append(f"{summary.failed} failed", style="red" if summary.failed else "")
        text.append(", ")
        text.append(f"{summary.skipped} skipped", style="yellow" if summary.skipped else "")
        text.append(f" in {Report.format_duration(duration)}", style="dim")
        return text
