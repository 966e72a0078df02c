"""
Action constructors that pair a desired state with the captured previous state.

Every constructor reads from the host synchronously before returning and never
writes.
"""

from __future__ import annotations

import logging
from typing import Optional

from wintune.errors import CapabilityUnavailableError, WinTuneError, is_fatal
from wintune.host.accessor import HostAccessor
from wintune.models import ConfigScalar

from .actions import (
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

logger = logging.getLogger(__name__)


def capture_registry_value(
    host: HostAccessor,
    feature: str,
    path: str,
    name: str,
    value_type: ValueType,
    desired: ConfigScalar,
) -> RegistryValueAction:
    current = host.read_config_value(path, name)
    if current.exists:
        previous = PreviousValue(
            exists=True,
            value=current.value,
            value_type=_value_type(current.value_type, path, name),
        )
    else:
        previous = PreviousValue(exists=False)

    return RegistryValueAction(
        feature=feature,
        path=path,
        name=name,
        value_type=value_type,
        desired=desired,
        previous=previous,
    )


def capture_service_state(
    host: HostAccessor,
    feature: str,
    name: str,
    start_mode: StartMode,
    run_state: RunState,
) -> ServiceStateAction | ServiceMissingAction:
    """
    Capture a service's start mode and run state.

    Returns:
        ServiceMissingAction when the service does not exist on this host.

    Raises:
        CapabilityUnavailableError: if the reported start mode is not recognized.
    """
    status = host.read_service_state(name)
    if status is None:
        logger.info("Service %s not present on this host", name)
        return ServiceMissingAction(feature=feature, name=name)

    try:
        previous_mode = StartMode.from_accessor(status.start_mode)
    except ValueError as exc:
        raise CapabilityUnavailableError(
            f"Unrecognized start mode for service {name}",
            details={"service": name, "start_mode": status.start_mode},
            cause=exc,
        ) from exc

    return ServiceStateAction(
        feature=feature,
        name=name,
        desired_start_mode=start_mode,
        desired_run_state=run_state,
        previous=PreviousService(
            exists=True,
            start_mode=previous_mode,
            run_state=RunState.from_accessor(status.run_state),
        ),
    )


def capture_power_plan(host: HostAccessor, feature: str, tier: PowerTier) -> PowerPlanAction:
    previous_id: Optional[str]
    try:
        previous_id = host.read_active_power_scheme_id()
    except (WinTuneError, OSError) as exc:
        if is_fatal(exc):
            raise
        logger.warning("Could not read active power scheme: %s", exc)
        previous_id = None

    if previous_id is None:
        logger.warning("Active power scheme unknown; %s will not be reverted", feature)

    return PowerPlanAction(feature=feature, desired_tier=tier, previous_active_id=previous_id)


def report_action(feature: str, kind: ReportKind) -> ReportAction:
    return ReportAction(feature=feature, kind=kind)


def snapshot_action(feature: str, stage: SnapshotStage) -> SnapshotAction:
    return SnapshotAction(feature=feature, stage=stage)


def _value_type(raw: Optional[str], path: str, name: str) -> ValueType:
    try:
        return ValueType(raw)
    except ValueError as exc:
        raise CapabilityUnavailableError(
            f"Unsupported registry value type for {path}\\{name}",
            details={"path": path, "name": name, "value_type": raw},
            cause=exc,
        ) from exc
