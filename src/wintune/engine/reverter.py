"""Reverter: restore captured previous state for every reversible action."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from wintune.context import RunContext
from wintune.errors import RevertError, is_fatal
from wintune.host.accessor import HostAccessor
from wintune.models import ActionResult
from wintune.plan import (
    REVERSIBLE_TYPES,
    Action,
    PowerPlanAction,
    RegistryValueAction,
    ServiceStateAction,
)

from .describe import describe_revert
from .outcomes import action_result, failed_result, wrap_error

logger = logging.getLogger(__name__)


class _NothingToRestore(Exception):
    """Internal signal: the action is a no-op on revert."""


class Reverter:
    """
    Replay inverse operations in the stored plan order (not reversed).

    Actions in a plan are mutually independent, so forward order is safe.
    Per-variant semantics:
        - RegistryValue: remove when previously absent, else write the captured
          value with its captured type.
        - ServiceState: restore start mode and run state.
        - PowerPlan: reactivate previous_active_id; skipped when unknown.
        - ServiceMissing, Report, Snapshot: nothing to restore.
    """

    def __init__(self, host: HostAccessor, ctx: RunContext) -> None:
        self._host = host
        self._ctx = ctx

    def revert(self, plan: Sequence[Action]) -> list[ActionResult]:
        results: list[ActionResult] = []
        total = len(plan)

        for seq, action in enumerate(plan):
            description = describe_revert(action)
            label = f"[{seq + 1}/{total}] {action.feature}: {description}"

            if self._ctx.dry_run:
                logger.info("[DRY RUN] %s", label)
                results.append(action_result(seq, action, "SKIPPED", detail=description))
                continue

            try:
                self._revert_one(action)
            except _NothingToRestore as skip:
                logger.info("%s (skipped)", label)
                results.append(action_result(seq, action, "SKIPPED", detail=str(skip) or description))
                continue
            except Exception as exc:
                if is_fatal(exc):
                    raise
                err = wrap_error(exc, action, RevertError)
                logger.error("%s failed: %s", label, err)
                results.append(failed_result(seq, action, err))
                continue

            logger.info("%s ok", label)
            results.append(action_result(seq, action, "OK", detail=description))

        return results

    # ----------------------------
    # Internals
    # ----------------------------
    def _revert_one(self, action: Action) -> None:
        host = self._host

        if action.action_type not in REVERSIBLE_TYPES:
            raise _NothingToRestore()

        if isinstance(action, RegistryValueAction):
            previous = action.previous
            if not previous.exists:
                host.remove_config_value(action.path, action.name)
                return
            value_type = previous.value_type or action.value_type
            host.write_config_value(action.path, action.name, value_type.value, previous.value)  # type: ignore[arg-type]
            return

        if isinstance(action, ServiceStateAction):
            previous = action.previous
            if previous.start_mode is None or previous.run_state is None:
                raise RevertError(
                    f"Previous state of service {action.name} was not captured",
                    details={"service": action.name},
                )
            host.set_service_state(action.name, previous.start_mode.to_accessor(), previous.run_state.value)
            return

        if isinstance(action, PowerPlanAction):
            previous_id: Optional[str] = action.previous_active_id
            if previous_id is None:
                logger.warning("No previous power scheme recorded for %s; not guessing one", action.feature)
                raise _NothingToRestore("previous power scheme unknown")
            host.set_active_power_scheme_id(previous_id)
            return

        raise RevertError("Unsupported action", details={"action": repr(action)})
