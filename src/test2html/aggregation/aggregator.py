"""Aggregation engine folding test events into a report tree."""

import logging
from datetime import datetime
from typing import Iterable

from test2html.aggregation.naming import format_test_name, split_test_name
from test2html.events.model import Action, TestEvent
from test2html.models.report import PackageNode, Report, TestNode
from test2html.models.summary import TestStatus

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Go Test Report"

TERMINAL_STATUS = {
    Action.PASS.value: TestStatus.PASSED,
    Action.FAIL.value: TestStatus.FAILED,
    Action.SKIP.value: TestStatus.SKIPPED,
}


def find_empty_packages(events: Iterable[TestEvent]) -> set[str]:
    """Find packages reported as having no test files.

    The toolchain marks these with a package-level ``skip`` of zero
    elapsed time.
    """
    return {
        event.package
        for event in events
        if event.action == Action.SKIP.value and event.elapsed == 0 and event.is_package_event
    }


class EventAggregator:
    """Folds an ordered event sequence into a Report.

    The fold runs in three steps: empty-package detection, the main pass
    over events in input order, and a reconciliation pass that backfills
    top-level leaf tests the main pass left uncounted.
    """

    def __init__(self, title: str = DEFAULT_TITLE, generated_at: datetime | None = None):
        self.title = title
        self.generated_at = generated_at

    def aggregate(self, events: Iterable[TestEvent]) -> Report:
        """Aggregate events into a fully populated report.

        Args:
            events: Events in input order

        Returns:
            Report with packages, test trees and counters populated
        """
        events = list(events)

        report = Report(title=self.title)
        if self.generated_at is not None:
            report.generated_at = self.generated_at

        empty_packages = find_empty_packages(events)
        if empty_packages:
            logger.info(
                "Skipping %d package(s) with no test files: %s",
                len(empty_packages),
                ", ".join(sorted(empty_packages)),
            )

        for sequence, event in enumerate(events):
            if event.package in empty_packages:
                continue
            self._apply_event(report, event, sequence)

        self._reconcile_counts(report)

        logger.info(
            "Aggregated %d events into %d package(s): %d total, %d passed, %d failed, %d skipped",
            len(events),
            len(report.packages),
            report.summary.total,
            report.summary.passed,
            report.summary.failed,
            report.summary.skipped,
        )
        return report

    def _apply_event(self, report: Report, event: TestEvent, sequence: int) -> None:
        """Fold a single event into the report."""
        pkg = report.packages.get(event.package)
        if pkg is None:
            pkg = PackageNode(name=event.package)
            report.packages[event.package] = pkg

        # Package-level events carry no per-test information
        if event.is_package_event:
            return

        timestamp = event.parsed_time()
        test = self._get_or_create_test(pkg, event.test, timestamp, sequence)

        action = event.action
        if action == Action.RUN.value:
            test.timestamp = timestamp
            test.sequence = sequence

        elif action in TERMINAL_STATUS:
            status = TERMINAL_STATUS[action]
            test.duration = event.elapsed
            # A parent already failed by one of its subtests stays failed
            if not (status == TestStatus.PASSED and test.child_failed):
                test.status = status

            # Only count in summary if it's a leaf test (no children)
            if test.is_leaf:
                self._count(report, pkg, test, status)

            # Skipped tests add nothing to the cumulative duration
            if status != TestStatus.SKIPPED:
                pkg.duration += event.elapsed
                report.duration += event.elapsed

            # A failing subtest fails its direct parent
            if status == TestStatus.FAILED and test.is_subtest:
                parent = pkg.tests.get(test.parent)
                if parent is not None:
                    parent.status = TestStatus.FAILED
                    parent.child_failed = True

        elif action == Action.OUTPUT.value:
            if event.output:
                test.output.append(event.output)

        else:
            logger.debug("Ignoring %r event for %s in %s", action, event.test, event.package)

    def _get_or_create_test(
        self,
        pkg: PackageNode,
        name: str,
        timestamp: datetime,
        sequence: int,
        placeholder: bool = False,
    ) -> TestNode:
        """Look up a test by full name, creating it (and missing parents) on first sight."""
        test = pkg.tests.get(name)
        if test is not None:
            return test

        is_subtest, parent_name = split_test_name(name)
        test = TestNode(
            name=name,
            display_name=format_test_name(name),
            package=pkg.name,
            timestamp=timestamp,
            sequence=sequence,
            is_subtest=is_subtest,
        )
        pkg.tests[name] = test

        if placeholder:
            logger.debug("Created placeholder parent %s in %s", name, pkg.name)

        if is_subtest:
            # Parent timestamp is corrected once its own run event arrives
            parent = self._get_or_create_test(
                pkg, parent_name, timestamp, sequence, placeholder=True
            )
            parent.add_child(test)

        return test

    def _count(self, report: Report, pkg: PackageNode, test: TestNode, status: TestStatus) -> None:
        """Record a leaf outcome on both the package and the report."""
        pkg.summary.record(status)
        report.summary.record(status)
        if test.counted is None:
            test.counted = status

    def _reconcile_counts(self, report: Report) -> None:
        """Count top-level leaf tests that finished but were never counted.

        Each test is counted at most once here, and never if the main pass
        already counted it.
        """
        for pkg in report.packages.values():
            for test in pkg.iter_tests():
                if test.is_subtest or not test.is_leaf:
                    continue
                if test.counted is not None or test.status == TestStatus.UNKNOWN:
                    continue
                logger.debug("Backfilling %s count for %s in %s", test.status.value, test.name, pkg.name)
                self._count(report, pkg, test, test.status)


def aggregate_events(
    events: Iterable[TestEvent],
    title: str = DEFAULT_TITLE,
    *,
    generated_at: datetime | None = None,
) -> Report:
    """Convenience function to aggregate events into a Report.

    Args:
        events: Events in input order
        title: Report title
        generated_at: Generation time (defaults to now)

    Returns:
        The aggregated Report
    """
    aggregator = EventAggregator(title=title, generated_at=generated_at)
    return aggregator.aggregate(events)
