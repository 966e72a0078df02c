"""Host accessor exports for wintune."""

from __future__ import annotations

from .accessor import HostAccessor
from .windows import WindowsHost

__all__ = ["HostAccessor", "WindowsHost"]
