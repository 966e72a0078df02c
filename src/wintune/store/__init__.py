"""Public store exports for wintune."""

from __future__ import annotations

from .codec import action_from_dict, action_to_dict, result_from_dict, result_to_dict
from .manifest import SCHEMA_VERSION, RunManifest
from .manifest_store import (
    MANIFEST_NAME,
    RESULTS_NAME,
    REVERT_RESULTS_NAME,
    TRANSCRIPT_NAME,
    ManifestStore,
)

__all__ = [
    "RunManifest",
    "ManifestStore",
    "SCHEMA_VERSION",
    "MANIFEST_NAME",
    "RESULTS_NAME",
    "REVERT_RESULTS_NAME",
    "TRANSCRIPT_NAME",
    "action_to_dict",
    "action_from_dict",
    "result_to_dict",
    "result_from_dict",
]
