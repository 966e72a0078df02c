"""Human-readable descriptions of actions, used for dry runs and logs."""

from __future__ import annotations

from wintune.plan import (
    Action,
    PowerPlanAction,
    PowerTier,
    RegistryValueAction,
    ReportAction,
    ServiceMissingAction,
    ServiceStateAction,
    SnapshotAction,
)


def describe_apply(action: Action) -> str:
    if isinstance(action, RegistryValueAction):
        return f"set {action.path}\\{action.name} = {action.desired!r} ({action.value_type.value})"

    if isinstance(action, ServiceStateAction):
        return (
            f"set service {action.name} start={action.desired_start_mode.value} "
            f"state={action.desired_run_state.value}"
        )

    if isinstance(action, ServiceMissingAction):
        return f"skip service {action.name} (not present)"

    if isinstance(action, PowerPlanAction):
        if action.desired_tier is PowerTier.ULTIMATE_PERFORMANCE:
            return "activate UltimatePerformance scheme (duplicated from template)"
        return f"activate {action.desired_tier.value} power scheme"

    if isinstance(action, ReportAction):
        return f"write {action.kind.value} report"

    if isinstance(action, SnapshotAction):
        return f"capture {action.stage.value.lower()} snapshot"

    raise TypeError(f"Unsupported action: {action!r}")


def describe_revert(action: Action) -> str:
    if isinstance(action, RegistryValueAction):
        target = f"{action.path}\\{action.name}"
        if not action.previous.exists:
            return f"remove {target}"
        value_type = action.previous.value_type.value if action.previous.value_type else "?"
        return f"restore {target} = {action.previous.value!r} ({value_type})"

    if isinstance(action, ServiceStateAction):
        mode = action.previous.start_mode.value if action.previous.start_mode else "?"
        state = action.previous.run_state.value if action.previous.run_state else "?"
        return f"restore service {action.name} start={mode} state={state}"

    if isinstance(action, PowerPlanAction):
        if action.previous_active_id is None:
            return "skip power scheme restore (previous scheme unknown)"
        return f"reactivate power scheme {action.previous_active_id}"

    if isinstance(action, (ServiceMissingAction, ReportAction, SnapshotAction)):
        return f"nothing to restore for {action.action_type.value}"

    raise TypeError(f"Unsupported action: {action!r}")
