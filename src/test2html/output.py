"""Writing rendered reports to disk."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from test2html.errors import ReportWriteError

logger = logging.getLogger(__name__)


def write_report(content: str, path: Path) -> Path:
    """Write a rendered report, replacing any existing file atomically.

    The content goes to a temporary file next to ``path`` first, so a
    failed write never leaves a truncated report behind.

    Raises:
        ReportWriteError: If the destination cannot be created or written
    """
    tmp_name: str | None = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(content)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ReportWriteError(f"Error writing report to {path}: {e}") from e

    logger.info("Wrote %d bytes to %s", len(content), path)
    return path
