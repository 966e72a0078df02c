"""Exception hierarchy and OS error mapping for wintune."""

from __future__ import annotations

from typing import Any, Optional

_WINERROR_ACCESS_DENIED = 5
_WINERROR_FILE_NOT_FOUND = 2


class WinTuneError(Exception):
    """
    Base exception for wintune.

    Attributes:
        details: Optional structured information (e.g., registry path, service name).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidArgumentError(WinTuneError):
    """Raised when a caller passes an unknown profile/feature or malformed input."""


class InvalidStateError(WinTuneError):
    """Raised when the library is used in an invalid state (e.g., run directory reuse)."""


class CapabilityUnavailableError(WinTuneError):
    """Raised when a key, service or scheme cannot be read at all (not the same as absent)."""


class PermissionDeniedError(WinTuneError):
    """Raised when the host rejects a write."""


class ApplyError(WinTuneError):
    """Raised when a write was attempted during apply and failed."""


class RevertError(WinTuneError):
    """Raised when a write was attempted during revert and failed."""


class ManifestError(WinTuneError):
    """Base class for problems loading a prior run manifest."""


class ManifestMissingError(ManifestError):
    """Raised when no manifest exists at the resolved run directory."""


class ManifestCorruptError(ManifestError):
    """Raised when a manifest exists but cannot be parsed."""


class PreconditionFailedError(WinTuneError):
    """Raised when the host does not meet operating assumptions (e.g., not elevated)."""


def map_os_error(
    exc: OSError,
    *,
    operation: str,
    target: str,
) -> WinTuneError:
    """
    Map an OSError raised by a host call to a wintune exception.

    Policy:
        - PermissionError / winerror 5 -> PermissionDeniedError
        - FileNotFoundError / winerror 2 -> CapabilityUnavailableError
        - otherwise -> ApplyError
    """
    winerror = getattr(exc, "winerror", None)
    details: dict[str, Any] = {
        "operation": operation,
        "target": target,
        "winerror": winerror,
    }
    message = f"{operation} failed for {target}: {exc}"

    if isinstance(exc, PermissionError) or winerror == _WINERROR_ACCESS_DENIED:
        return PermissionDeniedError(message, details=details, cause=exc)
    if isinstance(exc, FileNotFoundError) or winerror == _WINERROR_FILE_NOT_FOUND:
        return CapabilityUnavailableError(message, details=details, cause=exc)

    return ApplyError(message, details=details, cause=exc)


def is_fatal(exc: BaseException) -> bool:
    """Return True for errors that must abort a run instead of failing one action."""
    return isinstance(exc, (PreconditionFailedError, ManifestError))
