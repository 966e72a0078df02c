"""wintune public API."""

from __future__ import annotations

from wintune.config import Settings, load_settings
from wintune.context import RunContext
from wintune.engine import Executor, Reverter
from wintune.errors import (
    ApplyError,
    CapabilityUnavailableError,
    InvalidArgumentError,
    InvalidStateError,
    ManifestCorruptError,
    ManifestError,
    ManifestMissingError,
    PermissionDeniedError,
    PreconditionFailedError,
    RevertError,
    WinTuneError,
)
from wintune.host import HostAccessor, WindowsHost
from wintune.manager import TuneManager
from wintune.models import ActionResult, RunResult
from wintune.plan import Action, ActionType, Feature, Profile, build_plan
from wintune.store import ManifestStore, RunManifest

__all__ = [
    # High-level
    "TuneManager",
    "Settings",
    "load_settings",
    "RunContext",
    # Engine
    "Executor",
    "Reverter",
    "build_plan",
    # Host
    "HostAccessor",
    "WindowsHost",
    # Plan / Models
    "Action",
    "ActionType",
    "Feature",
    "Profile",
    "ActionResult",
    "RunResult",
    "ManifestStore",
    "RunManifest",
    # Errors
    "WinTuneError",
    "InvalidArgumentError",
    "InvalidStateError",
    "CapabilityUnavailableError",
    "PermissionDeniedError",
    "ApplyError",
    "RevertError",
    "ManifestError",
    "ManifestMissingError",
    "ManifestCorruptError",
    "PreconditionFailedError",
]
