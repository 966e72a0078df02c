"""Action model: a closed set of typed actions with captured prior state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from wintune.models import ConfigScalar


class ValueType(str, Enum):
    """Registry value types handled by wintune."""

    INT = "Int"
    STRING = "String"


_START_MODE_ALIASES: dict[str, str] = {
    "auto": "Automatic",
    "automatic": "Automatic",
    "auto_start": "Automatic",
    "demand": "Manual",
    "manual": "Manual",
    "demand_start": "Manual",
    "disabled": "Disabled",
}


class StartMode(str, Enum):
    """Normalized service start modes."""

    AUTOMATIC = "Automatic"
    MANUAL = "Manual"
    DISABLED = "Disabled"

    @classmethod
    def from_accessor(cls, raw: str) -> StartMode:
        """Normalize an accessor-reported start mode ("Auto", "DEMAND_START", ...)."""
        key = raw.strip().lower()
        if key not in _START_MODE_ALIASES:
            raise ValueError(f"Unknown service start mode: {raw!r}")
        return cls(_START_MODE_ALIASES[key])

    def to_accessor(self) -> str:
        """Return the accessor spelling; inverse of from_accessor."""
        if self is StartMode.AUTOMATIC:
            return "Auto"
        return self.value


_RUNNING_STATES: set[str] = {
    "running",
    "startpending",
    "start_pending",
    "continuepending",
    "continue_pending",
}


class RunState(str, Enum):
    """Normalized service run states."""

    RUNNING = "Running"
    STOPPED = "Stopped"

    @classmethod
    def from_accessor(cls, raw: str) -> RunState:
        if raw.strip().lower() in _RUNNING_STATES:
            return cls.RUNNING
        return cls.STOPPED


class PowerTier(str, Enum):
    BALANCED = "Balanced"
    HIGH_PERFORMANCE = "HighPerformance"
    ULTIMATE_PERFORMANCE = "UltimatePerformance"


class ReportKind(str, Enum):
    STARTUP_ENTRIES = "StartupEntries"


class SnapshotStage(str, Enum):
    BEFORE = "Before"
    AFTER = "After"


class ActionType(str, Enum):
    """Discriminator for the Action sum type."""

    REGISTRY_VALUE = "RegistryValue"
    SERVICE_STATE = "ServiceState"
    SERVICE_MISSING = "ServiceMissing"
    POWER_PLAN = "PowerPlan"
    REPORT = "Report"
    SNAPSHOT = "Snapshot"


@dataclass(slots=True, frozen=True)
class PreviousValue:
    """Registry value state captured before mutation."""

    exists: bool
    value: Optional[ConfigScalar] = None
    value_type: Optional[ValueType] = None


@dataclass(slots=True, frozen=True)
class PreviousService:
    """Service state captured before mutation."""

    exists: bool
    start_mode: Optional[StartMode] = None
    run_state: Optional[RunState] = None


@dataclass(slots=True, frozen=True)
class RegistryValueAction:
    feature: str
    path: str
    name: str
    value_type: ValueType
    desired: ConfigScalar
    previous: PreviousValue

    action_type: ClassVar[ActionType] = ActionType.REGISTRY_VALUE


@dataclass(slots=True, frozen=True)
class ServiceStateAction:
    feature: str
    name: str
    desired_start_mode: StartMode
    desired_run_state: RunState
    previous: PreviousService

    action_type: ClassVar[ActionType] = ActionType.SERVICE_STATE


@dataclass(slots=True, frozen=True)
class ServiceMissingAction:
    """Placeholder for a catalog service that does not exist on this host."""

    feature: str
    name: str

    action_type: ClassVar[ActionType] = ActionType.SERVICE_MISSING


@dataclass(slots=True)
class PowerPlanAction:
    """
    Activate the scheme for desired_tier.

    Notes:
        - previous_active_id is None when the active scheme could not be read
          at plan time; revert is then skipped.
        - resolved_id is filled in by the Executor (the only mutable field).
    """

    feature: str
    desired_tier: PowerTier
    previous_active_id: Optional[str]
    resolved_id: Optional[str] = None

    action_type: ClassVar[ActionType] = ActionType.POWER_PLAN


@dataclass(slots=True, frozen=True)
class ReportAction:
    feature: str
    kind: ReportKind

    action_type: ClassVar[ActionType] = ActionType.REPORT


@dataclass(slots=True, frozen=True)
class SnapshotAction:
    feature: str
    stage: SnapshotStage

    action_type: ClassVar[ActionType] = ActionType.SNAPSHOT


# Extend this union together with the apply, revert and describe handlers.
Action = Union[
    RegistryValueAction,
    ServiceStateAction,
    ServiceMissingAction,
    PowerPlanAction,
    ReportAction,
    SnapshotAction,
]

REVERSIBLE_TYPES: set[ActionType] = {
    ActionType.REGISTRY_VALUE,
    ActionType.SERVICE_STATE,
    ActionType.POWER_PLAN,
}
