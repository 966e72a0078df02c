"""Records returned by host accessors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

ConfigScalar = Union[int, str]


@dataclass(slots=True, frozen=True)
class ConfigValue:
    """
    Existence-qualified result of reading one registry value.

    Notes:
        - exists=False means the value (or its key) is absent; value and
          value_type are None.
        - value_type is the ValueType name ("Int" or "String").
    """

    exists: bool
    value: Optional[ConfigScalar] = None
    value_type: Optional[str] = None


@dataclass(slots=True, frozen=True)
class ServiceStatus:
    """Raw service state as reported by the accessor (e.g. start_mode="Auto")."""

    start_mode: str
    run_state: str


@dataclass(slots=True, frozen=True)
class StartupEntry:
    """One autostart entry (Run key value)."""

    name: str
    command: str
    location: str
