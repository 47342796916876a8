"""Aggregation engine for folding test events into a report."""

from test2html.aggregation.aggregator import (
    DEFAULT_TITLE,
    EventAggregator,
    aggregate_events,
    find_empty_packages,
)
from test2html.aggregation.naming import (
    extract_test_name,
    format_test_name,
    split_test_name,
)

__all__ = [
    "DEFAULT_TITLE",
    "EventAggregator",
    "aggregate_events",
    "find_empty_packages",
    "extract_test_name",
    "format_test_name",
    "split_test_name",
]
