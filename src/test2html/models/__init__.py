"""Data models for aggregated test reports."""

from test2html.models.summary import (
    Summary,
    TestStatus,
)
from test2html.models.report import (
    PackageNode,
    Report,
    TestNode,
)

__all__ = [
    "Summary",
    "TestStatus",
    "PackageNode",
    "Report",
    "TestNode",
]
