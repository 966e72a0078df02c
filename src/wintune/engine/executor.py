"""Executor: apply a Plan to the host with per-action failure isolation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from wintune.context import RunContext
from wintune.errors import ApplyError, InvalidStateError, is_fatal
from wintune.host.accessor import HostAccessor
from wintune.models import ActionResult
from wintune.plan import (
    BALANCED_SCHEME_ID,
    HIGH_PERFORMANCE_SCHEME_ID,
    ULTIMATE_PERFORMANCE_TEMPLATE_ID,
    Action,
    PowerPlanAction,
    PowerTier,
    RegistryValueAction,
    ReportAction,
    ReportKind,
    ServiceMissingAction,
    ServiceStateAction,
    SnapshotAction,
)

from .artifacts import collect_snapshot, write_snapshot, write_startup_entries
from .describe import describe_apply
from .outcomes import action_result, failed_result, wrap_error

logger = logging.getLogger(__name__)


class Executor:
    """
    Apply actions in plan order.

    Policy:
        - One host write per action (Ultimate power tier may also duplicate a
          scheme first).
        - A failing action is recorded FAILED and the next action still runs.
        - Fatal errors (precondition/manifest) propagate.
        - Dry run performs no writes and reports SKIPPED with the intended
          operation as detail.
    """

    def __init__(self, host: HostAccessor, ctx: RunContext) -> None:
        self._host = host
        self._ctx = ctx

    def execute(self, plan: Sequence[Action]) -> list[ActionResult]:
        results: list[ActionResult] = []
        total = len(plan)

        for seq, action in enumerate(plan):
            label = f"[{seq + 1}/{total}] {action.feature}: {describe_apply(action)}"

            if self._ctx.dry_run:
                logger.info("[DRY RUN] %s", label)
                results.append(action_result(seq, action, "SKIPPED", detail=describe_apply(action)))
                continue

            try:
                detail = self._apply_one(action)
            except Exception as exc:
                if is_fatal(exc):
                    raise
                err = wrap_error(exc, action, ApplyError)
                logger.error("%s failed: %s", label, err)
                results.append(failed_result(seq, action, err))
                continue

            logger.info("%s ok", label)
            results.append(action_result(seq, action, "OK", detail=detail))

        return results

    # ----------------------------
    # Internals
    # ----------------------------
    def _apply_one(self, action: Action) -> Optional[str]:
        """Apply one action. Returns an optional detail string for the result."""
        host = self._host

        if isinstance(action, RegistryValueAction):
            host.write_config_value(action.path, action.name, action.value_type.value, action.desired)
            return None

        if isinstance(action, ServiceStateAction):
            host.set_service_state(
                action.name,
                action.desired_start_mode.to_accessor(),
                action.desired_run_state.value,
            )
            return None

        if isinstance(action, ServiceMissingAction):
            return "service not present; nothing to apply"

        if isinstance(action, PowerPlanAction):
            if action.resolved_id is not None:
                # Applied before: reactivate the same scheme instead of duplicating the template again.
                host.set_active_power_scheme_id(action.resolved_id)
                return f"resolved {action.resolved_id} (reused)"
            scheme_id, fell_back = self._resolve_scheme(action.desired_tier)
            host.set_active_power_scheme_id(scheme_id)
            action.resolved_id = scheme_id
            if fell_back:
                return f"resolved {scheme_id} (fell back to {PowerTier.HIGH_PERFORMANCE.value})"
            return f"resolved {scheme_id}"

        if isinstance(action, ReportAction):
            run_dir = self._require_run_dir()
            if action.kind is ReportKind.STARTUP_ENTRIES:
                return str(write_startup_entries(run_dir, host))
            raise ApplyError("Unsupported report kind", details={"kind": action.kind.value})

        if isinstance(action, SnapshotAction):
            run_dir = self._require_run_dir()
            return str(write_snapshot(run_dir, action.stage, collect_snapshot(host)))

        raise ApplyError("Unsupported action", details={"action": repr(action)})

    def _resolve_scheme(self, tier: PowerTier) -> tuple[str, bool]:
        """Return (scheme_id, fell_back) for a tier."""
        if tier is PowerTier.BALANCED:
            return BALANCED_SCHEME_ID, False
        if tier is PowerTier.HIGH_PERFORMANCE:
            return HIGH_PERFORMANCE_SCHEME_ID, False

        try:
            return self._host.create_scheme_from_template(ULTIMATE_PERFORMANCE_TEMPLATE_ID), False
        except Exception as exc:
            if is_fatal(exc):
                raise
            logger.warning(
                "Could not create %s scheme (%s); falling back to %s",
                tier.value,
                exc,
                PowerTier.HIGH_PERFORMANCE.value,
            )
            return HIGH_PERFORMANCE_SCHEME_ID, True

    def _require_run_dir(self) -> Path:
        if self._ctx.run_dir is None:
            raise InvalidStateError("Run directory is not set; cannot write artifacts")
        return self._ctx.run_dir

