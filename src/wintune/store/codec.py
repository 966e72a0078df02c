"""JSON codec for actions and results (manifest wire format)."""

from __future__ import annotations

from typing import Any, Optional

from wintune.errors import ManifestCorruptError
from wintune.models import ActionResult
from wintune.plan import (
    Action,
    ActionType,
    PowerPlanAction,
    PowerTier,
    PreviousService,
    PreviousValue,
    RegistryValueAction,
    ReportAction,
    ReportKind,
    RunState,
    ServiceMissingAction,
    ServiceStateAction,
    SnapshotAction,
    SnapshotStage,
    StartMode,
    ValueType,
)


def action_to_dict(action: Action) -> dict[str, Any]:
    data: dict[str, Any] = {"type": action.action_type.value, "feature": action.feature}

    if isinstance(action, RegistryValueAction):
        prev = action.previous
        data.update(
            path=action.path,
            name=action.name,
            value_type=action.value_type.value,
            desired=action.desired,
            previous={
                "exists": prev.exists,
                "value": prev.value,
                "value_type": prev.value_type.value if prev.value_type else None,
            },
        )
        return data

    if isinstance(action, ServiceStateAction):
        prev_svc = action.previous
        data.update(
            name=action.name,
            desired_start_mode=action.desired_start_mode.value,
            desired_run_state=action.desired_run_state.value,
            previous={
                "exists": prev_svc.exists,
                "start_mode": prev_svc.start_mode.value if prev_svc.start_mode else None,
                "run_state": prev_svc.run_state.value if prev_svc.run_state else None,
            },
        )
        return data

    if isinstance(action, ServiceMissingAction):
        data.update(name=action.name)
        return data

    if isinstance(action, PowerPlanAction):
        data.update(
            desired_tier=action.desired_tier.value,
            previous_active_id=action.previous_active_id,
            resolved_id=action.resolved_id,
        )
        return data

    if isinstance(action, ReportAction):
        data.update(kind=action.kind.value)
        return data

    if isinstance(action, SnapshotAction):
        data.update(stage=action.stage.value)
        return data

    raise TypeError(f"Unsupported action: {action!r}")


def action_from_dict(data: dict[str, Any]) -> Action:
    """
    Rebuild an Action from its manifest form.

    Raises:
        ManifestCorruptError: on unknown type, missing keys or bad enum values.
    """
    try:
        action_type = ActionType(data["type"])
        feature = str(data["feature"])

        if action_type is ActionType.REGISTRY_VALUE:
            prev = data["previous"]
            return RegistryValueAction(
                feature=feature,
                path=data["path"],
                name=data["name"],
                value_type=ValueType(data["value_type"]),
                desired=data["desired"],
                previous=PreviousValue(
                    exists=bool(prev["exists"]),
                    value=prev.get("value"),
                    value_type=_optional(ValueType, prev.get("value_type")),
                ),
            )

        if action_type is ActionType.SERVICE_STATE:
            prev = data["previous"]
            return ServiceStateAction(
                feature=feature,
                name=data["name"],
                desired_start_mode=StartMode(data["desired_start_mode"]),
                desired_run_state=RunState(data["desired_run_state"]),
                previous=PreviousService(
                    exists=bool(prev["exists"]),
                    start_mode=_optional(StartMode, prev.get("start_mode")),
                    run_state=_optional(RunState, prev.get("run_state")),
                ),
            )

        if action_type is ActionType.SERVICE_MISSING:
            return ServiceMissingAction(feature=feature, name=data["name"])

        if action_type is ActionType.POWER_PLAN:
            return PowerPlanAction(
                feature=feature,
                desired_tier=PowerTier(data["desired_tier"]),
                previous_active_id=data.get("previous_active_id"),
                resolved_id=data.get("resolved_id"),
            )

        if action_type is ActionType.REPORT:
            return ReportAction(feature=feature, kind=ReportKind(data["kind"]))

        return SnapshotAction(feature=feature, stage=SnapshotStage(data["stage"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise ManifestCorruptError(
            "Invalid action record in manifest",
            details={"record": data},
            cause=exc,
        ) from exc


def result_to_dict(result: ActionResult) -> dict[str, Any]:
    return {
        "seq": result.seq,
        "feature": result.feature,
        "action_type": result.action_type,
        "status": result.status,
        "error_type": result.error_type,
        "error_message": result.error_message,
        "detail": result.detail,
    }


def result_from_dict(data: dict[str, Any]) -> ActionResult:
    return ActionResult(
        seq=int(data["seq"]),
        feature=data["feature"],
        action_type=data["action_type"],
        status=data["status"],
        error_type=data.get("error_type"),
        error_message=data.get("error_message"),
        detail=data.get("detail"),
    )


def _optional(enum_cls: Any, value: Optional[str]) -> Any:
    if value is None:
        return None
    return enum_cls(value)
