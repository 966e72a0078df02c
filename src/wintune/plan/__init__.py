"""Public plan exports for wintune."""

from __future__ import annotations

from .actions import (
    REVERSIBLE_TYPES,
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
from .builder import CaptureFailure, PlanBuild, build_plan, collect_plan
from .capture import (
    capture_power_plan,
    capture_registry_value,
    capture_service_state,
    report_action,
    snapshot_action,
)
from .features import (
    BALANCED_SCHEME_ID,
    FEATURE_RULES,
    HIGH_PERFORMANCE_SCHEME_ID,
    PROFILE_DEFAULTS,
    ULTIMATE_PERFORMANCE_TEMPLATE_ID,
    Feature,
    Profile,
    features_for,
    normalize_features,
    parse_profile,
    snapshot_targets,
)

__all__ = [
    "Action",
    "ActionType",
    "REVERSIBLE_TYPES",
    "RegistryValueAction",
    "ServiceStateAction",
    "ServiceMissingAction",
    "PowerPlanAction",
    "ReportAction",
    "SnapshotAction",
    "PreviousValue",
    "PreviousService",
    "ValueType",
    "StartMode",
    "RunState",
    "PowerTier",
    "ReportKind",
    "SnapshotStage",
    "build_plan",
    "collect_plan",
    "PlanBuild",
    "CaptureFailure",
    "capture_registry_value",
    "capture_service_state",
    "capture_power_plan",
    "report_action",
    "snapshot_action",
    "Feature",
    "Profile",
    "FEATURE_RULES",
    "PROFILE_DEFAULTS",
    "BALANCED_SCHEME_ID",
    "HIGH_PERFORMANCE_SCHEME_ID",
    "ULTIMATE_PERFORMANCE_TEMPLATE_ID",
    "features_for",
    "normalize_features",
    "parse_profile",
    "snapshot_targets",
]
