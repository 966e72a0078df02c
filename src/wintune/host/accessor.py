"""Host accessor capability interface."""

from __future__ import annotations

from typing import Optional, Protocol

from wintune.models import ConfigScalar, ConfigValue, ServiceStatus, StartupEntry


class HostAccessor(Protocol):
    """
    Narrow interface the engine uses to read and mutate host state.

    Notes:
        - Reads return existence-qualified results; "absent" is not an error.
        - Reads raise CapabilityUnavailableError when the target cannot be read
          at all.
        - Writes raise a wintune error (or OSError) on failure.
        - Start modes are passed in accessor spelling ("Auto", "Manual",
          "Disabled"); run states as "Running"/"Stopped".
    """

    def read_config_value(self, path: str, name: str) -> ConfigValue: ...

    def write_config_value(self, path: str, name: str, value_type: str, value: ConfigScalar) -> None: ...

    def remove_config_value(self, path: str, name: str) -> None: ...

    def read_service_state(self, name: str) -> Optional[ServiceStatus]: ...

    def set_service_state(self, name: str, start_mode: str, run_state: str) -> None: ...

    def read_active_power_scheme_id(self) -> Optional[str]: ...

    def set_active_power_scheme_id(self, scheme_id: str) -> None: ...

    def create_scheme_from_template(self, template_id: str) -> str: ...

    def list_startup_entries(self) -> list[StartupEntry]: ...

    def is_elevated(self) -> bool: ...

    def create_restore_point(self, description: str) -> None: ...
