"""Counter models shared by packages and the whole report."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class TestStatus(str, Enum):
    """Outcome of a single test node."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    UNKNOWN = "unknown"


@dataclass
class Summary:
    """Pass/fail/skip counters.

    Counters only ever move through ``record`` so that
    ``total == passed + failed + skipped`` holds at every point.
    """

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0

    def record(self, status: TestStatus) -> None:
        """Count one leaf test with the given terminal status."""
        if status == TestStatus.PASSED:
            self.passed += 1
        elif status == TestStatus.FAILED:
            self.failed += 1
        elif status == TestStatus.SKIPPED:
            self.skipped += 1
        else:
            return
        self.total += 1

    @property
    def pass_rate(self) -> float | None:
        """Calculate pass rate as a decimal (0.0 to 1.0)."""
        if self.total == 0:
            return None
        return self.passed / self.total

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
        }
