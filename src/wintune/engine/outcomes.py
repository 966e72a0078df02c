"""Helpers turning an action outcome into an ActionResult."""

from __future__ import annotations

from typing import Optional, Sequence

from wintune.errors import WinTuneError
from wintune.models import ActionResult, ActionStatus
from wintune.plan import Action, CaptureFailure


def action_result(
    seq: int,
    action: Action,
    status: ActionStatus,
    *,
    detail: Optional[str] = None,
) -> ActionResult:
    return ActionResult(
        seq=seq,
        feature=action.feature,
        action_type=action.action_type.value,
        status=status,
        detail=detail,
    )


def failed_result(seq: int, action: Action, exc: WinTuneError) -> ActionResult:
    return ActionResult(
        seq=seq,
        feature=action.feature,
        action_type=action.action_type.value,
        status="FAILED",
        error_type=exc.__class__.__name__,
        error_message=str(exc),
    )


def wrap_error(exc: Exception, action: Action, error_cls: type[WinTuneError]) -> WinTuneError:
    """Keep wintune errors as-is; wrap anything else in error_cls."""
    if isinstance(exc, WinTuneError):
        return exc
    return error_cls(
        str(exc) or exc.__class__.__name__,
        details={"feature": action.feature, "action_type": action.action_type.value},
        cause=exc,
    )


def capture_failure_results(first_seq: int, failures: Sequence[CaptureFailure]) -> list[ActionResult]:
    """
    FAILED results for features whose previous state could not be read.

    They follow the plan's own results, so seq starts at len(plan).
    """
    return [
        ActionResult(
            seq=first_seq + i,
            feature=f.feature,
            action_type=f.action_type.value,
            status="FAILED",
            error_type=f.error.__class__.__name__,
            error_message=str(f.error),
            detail="previous state could not be captured; not applied",
        )
        for i, f in enumerate(failures)
    ]
