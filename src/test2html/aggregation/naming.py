"""Test name parsing and display formatting."""

import re

TEST_PREFIX = "Test"
SUBTEST_SEPARATOR = "/"

# Lowercase letter directly followed by an uppercase one: "nS" in "LoginSuperuser"
CAMEL_BOUNDARY_PATTERN = re.compile(r"([a-z])([A-Z])")


def format_test_name(name: str) -> str:
    """Convert a test name to a human-readable form.

    Each ``/`` segment is formatted on its own, so
    ``TestLoginSuperuser/TestBadPassword`` becomes
    ``Test Login Superuser/Test Bad Password``. Segments that do not start
    with ``Test`` are returned unchanged.
    """
    if SUBTEST_SEPARATOR in name:
        return SUBTEST_SEPARATOR.join(
            format_test_name(part) for part in name.split(SUBTEST_SEPARATOR)
        )

    if not name.startswith(TEST_PREFIX):
        return name

    name = CAMEL_BOUNDARY_PATTERN.sub(r"\1 \2", name)
    name = name.replace("_", " ")

    rest = name[len(TEST_PREFIX):].lstrip(" ")
    if not rest:
        return TEST_PREFIX
    return f"{TEST_PREFIX} {rest}"


def extract_test_name(full_name: str) -> str:
    """Return the part of a test name after the last slash."""
    return full_name.rsplit(SUBTEST_SEPARATOR, 1)[-1]


def split_test_name(name: str) -> tuple[bool, str]:
    """Check if a test is a subtest and return its parent name.

    Returns:
        Tuple of (is_subtest, parent_name); parent_name is empty for root tests
    """
    if SUBTEST_SEPARATOR not in name:
        return False, ""
    return True, name.rsplit(SUBTEST_SEPARATOR, 1)[0]
