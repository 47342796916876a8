"""JSON renderer for aggregated reports."""

import json
from typing import Any

from test2html.models.report import Report
from test2html.renderers.base import OutputFormat


class JSONRenderer:
    """Renders a Report as JSON."""

    format = OutputFormat.JSON

    def render(
        self,
        report: Report,
        *,
        include_output: bool = True,
        **options,
    ) -> str:
        """Render the report as JSON.

        Args:
            report: The aggregated report
            include_output: Keep captured output lines on each test
            **options: Additional options (indent, etc.)

        Returns:
            JSON string representation of the report
        """
        data = report.to_dict()

        if not include_output:
            for pkg in data["packages"]:
                pkg["tests"] = [self._strip_output(test) for test in pkg["tests"]]

        indent = options.get("indent", 2)
        return json.dumps(data, indent=indent, default=str)

    def _strip_output(self, test_dict: dict[str, Any]) -> dict[str, Any]:
        """Drop captured output from a test and its children."""
        result = {k: v for k, v in test_dict.items() if k != "output"}
        if result.get("children"):
            result["children"] = [self._strip_output(child) for child in result["children"]]
        return result
