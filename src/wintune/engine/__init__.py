"""Apply/revert engine exports for wintune."""

from __future__ import annotations

from .artifacts import (
    REPORT_FILE_NAMES,
    SNAPSHOT_FILE_NAMES,
    STARTUP_REPORT_NAME,
    collect_snapshot,
    write_snapshot,
    write_startup_entries,
)
from .describe import describe_apply, describe_revert
from .executor import Executor
from .outcomes import capture_failure_results
from .reverter import Reverter

__all__ = [
    "Executor",
    "Reverter",
    "capture_failure_results",
    "describe_apply",
    "describe_revert",
    "collect_snapshot",
    "write_snapshot",
    "write_startup_entries",
    "REPORT_FILE_NAMES",
    "SNAPSHOT_FILE_NAMES",
    "STARTUP_REPORT_NAME",
]
