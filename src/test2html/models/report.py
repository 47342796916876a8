"""Report tree models: packages, tests and subtests."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterator

from test2html.aggregation.naming import extract_test_name
from test2html.models.summary import Summary, TestStatus


def _order_key(node: "TestNode") -> tuple[datetime, int]:
    return (node.timestamp, node.sequence)


@dataclass
class TestNode:
    """A test or subtest.

    Identity is the fully-qualified name (``Parent/Child`` for subtests).
    ``children`` maps the full name of each immediate subtest to its node;
    the owning reference lives in ``PackageNode.tests``.
    """

    __test__ = False

    # Identity
    name: str
    display_name: str
    package: str

    # Outcome
    status: TestStatus = TestStatus.UNKNOWN
    duration: float = 0.0
    output: list[str] = field(default_factory=list)

    # Ordering only: start time, then event index for equal times
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    sequence: int = 0

    # Tree structure
    children: dict[str, "TestNode"] = field(default_factory=dict, repr=False)
    is_subtest: bool = False
    parent: str = ""

    # Set once a direct subtest fails; a later own `pass` keeps the failure
    child_failed: bool = field(default=False, repr=False)

    # Status this node was tallied under, None until counted
    counted: TestStatus | None = field(default=None, repr=False)

    @property
    def is_leaf(self) -> bool:
        """Check if this is a leaf node (no children)."""
        return len(self.children) == 0

    @property
    def short_name(self) -> str:
        """Last segment of the display name; the tree view supplies the rest."""
        return extract_test_name(self.display_name)

    @property
    def passed(self) -> bool:
        return self.status == TestStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status == TestStatus.FAILED

    @property
    def skipped(self) -> bool:
        return self.status == TestStatus.SKIPPED

    def add_child(self, child: "TestNode") -> None:
        """Link a subtest under this node."""
        child.parent = self.name
        self.children[child.name] = child

    def sorted_children(self) -> list["TestNode"]:
        """Return child tests sorted by timestamp."""
        return sorted(self.children.values(), key=_order_key)

    def iter_tree(self) -> Iterator["TestNode"]:
        """Yield this node and its descendants in display order."""
        yield self
        for child in self.sorted_children():
            yield from child.iter_tree()

    def to_dict(self, include_children: bool = True) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "display_name": self.short_name,
            "package": self.package,
            "status": self.status.value,
            "duration": self.duration,
            "timestamp": self.timestamp.isoformat(),
            "is_subtest": self.is_subtest,
        }

        if self.parent:
            result["parent"] = self.parent

        if self.output:
            result["output"] = list(self.output)

        if include_children and self.children:
            result["children"] = [
                child.to_dict(include_children=True) for child in self.sorted_children()
            ]

        return result


@dataclass
class PackageNode:
    """All tests of one package plus its counters."""

    name: str
    tests: dict[str, TestNode] = field(default_factory=dict)
    duration: float = 0.0
    summary: Summary = field(default_factory=Summary)

    @property
    def status(self) -> TestStatus:
        """Overall package outcome derived from its counters."""
        if self.summary.failed:
            return TestStatus.FAILED
        if self.summary.passed:
            return TestStatus.PASSED
        if self.summary.skipped:
            return TestStatus.SKIPPED
        return TestStatus.UNKNOWN

    def root_tests(self) -> list[TestNode]:
        """Return top-level tests (non-subtests) sorted by timestamp."""
        roots = [test for test in self.tests.values() if not test.is_subtest]
        return sorted(roots, key=_order_key)

    def iter_tests(self) -> Iterator[TestNode]:
        """Iterate over all tests depth-first in display order."""
        for root in self.root_tests():
            yield from root.iter_tree()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "duration": self.duration,
            "summary": self.summary.to_dict(),
            "tests": [test.to_dict() for test in self.root_tests()],
        }


@dataclass
class Report:
    """The complete aggregated report."""

    title: str
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    duration: float = 0.0
    summary: Summary = field(default_factory=Summary)
    packages: dict[str, PackageNode] = field(default_factory=dict)

    def get_package(self, name: str) -> PackageNode | None:
        return self.packages.get(name)

    def sorted_packages(self) -> list[PackageNode]:
        """Return packages sorted by name."""
        return [self.packages[name] for name in sorted(self.packages)]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "generated_at": self.generated_at.isoformat(),
            "duration": self.duration,
            "summary": self.summary.to_dict(),
            "packages": [pkg.to_dict() for pkg in self.sorted_packages()],
        }

    @staticmethod
    def format_duration(seconds: float) -> str:
        """Format duration in human-readable form."""
        if seconds < 1:
            return f"{seconds:.2f}s"
        elif seconds < 60:
            return f"{seconds:.1f}s"
        elif seconds < 3600:
            minutes = int(seconds // 60)
            secs = int(seconds % 60)
            return f"{minutes}m {secs}s"
        else:
            hours = int(seconds // 3600)
            minutes = int((seconds % 3600) // 60)
            return f"{hours}h {minutes}m"
