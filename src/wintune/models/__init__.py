"""Public model exports for wintune."""

from __future__ import annotations

from .host_state import ConfigScalar, ConfigValue, ServiceStatus, StartupEntry
from .results import ActionResult, ActionStatus, RunMode, RunResult, summarize_results

__all__ = [
    "ConfigScalar",
    "ConfigValue",
    "ServiceStatus",
    "StartupEntry",
    "ActionStatus",
    "RunMode",
    "ActionResult",
    "RunResult",
    "summarize_results",
]
