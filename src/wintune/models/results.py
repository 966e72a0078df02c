"""Result models for apply/revert passes."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional


# SKIPPED: dry-run preview or nothing to restore on revert.
ActionStatus = Literal["OK", "FAILED", "SKIPPED"]
RunMode = Literal["apply", "revert"]


@dataclass(slots=True)
class ActionResult:
    """Result for a single Action in a pass."""

    seq: int
    feature: str
    action_type: str
    status: ActionStatus

    error_type: Optional[str] = None
    error_message: Optional[str] = None
    detail: Optional[str] = None


@dataclass(slots=True)
class RunResult:
    """Aggregate result for TuneManager.apply/revert."""

    mode: RunMode
    dry_run: bool
    results: list[ActionResult]

    run_id: Optional[str] = None
    run_dir: Optional[Path] = None
    summary: dict[str, int] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return any(r.status == "FAILED" for r in self.results)


def summarize_results(results: list[ActionResult]) -> dict[str, int]:
    summary: dict[str, int] = {"OK": 0, "FAILED": 0, "SKIPPED": 0}
    for r in results:
        summary[r.status] = summary.get(r.status, 0) + 1
    return summary
