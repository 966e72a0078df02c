"""Public error exports for wintune."""

from __future__ import annotations

from .exceptions import (
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
    is_fatal,
    map_os_error,
)

__all__ = [
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
    "is_fatal",
    "map_os_error",
]
