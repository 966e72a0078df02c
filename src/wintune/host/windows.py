"""Windows host accessor: registry via winreg, services via sc.exe, power via powercfg."""

from __future__ import annotations

import logging
import re
import subprocess
import sys
from typing import Any, Optional, Sequence

from wintune.errors import (
    ApplyError,
    CapabilityUnavailableError,
    InvalidArgumentError,
    PermissionDeniedError,
    PreconditionFailedError,
    WinTuneError,
    map_os_error,
)
from wintune.models import ConfigScalar, ConfigValue, ServiceStatus, StartupEntry

logger = logging.getLogger(__name__)

_GUID_RE = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")
_SC_FIELD_RE = re.compile(r"^\s*(?P<key>[A-Z_]+)\s*:\s*(?P<value>.*)$")

# sc.exe exit codes
_SC_SERVICE_DOES_NOT_EXIST = 1060
_SC_ALREADY_RUNNING = 1056
_SC_NOT_ACTIVE = 1062

_SC_START_TYPES: dict[str, str] = {
    "AUTO_START": "Auto",
    "DEMAND_START": "Manual",
    "DISABLED": "Disabled",
}
_SC_CONFIG_START: dict[str, str] = {
    "auto": "auto",
    "automatic": "auto",
    "manual": "demand",
    "disabled": "disabled",
}

_RUN_KEYS: tuple[str, ...] = (
    r"HKCU\Software\Microsoft\Windows\CurrentVersion\Run",
    r"HKLM\SOFTWARE\Microsoft\Windows\CurrentVersion\Run",
    r"HKLM\SOFTWARE\WOW6432Node\Microsoft\Windows\CurrentVersion\Run",
)


def parse_sc_fields(output: str) -> dict[str, str]:
    """Parse `KEY : value` lines from sc.exe output."""
    fields: dict[str, str] = {}
    for line in output.splitlines():
        m = _SC_FIELD_RE.match(line)
        if m:
            fields.setdefault(m.group("key"), m.group("value").strip())
    return fields


def parse_sc_qc(output: str) -> str:
    """
    Return the start mode from `sc qc` output in accessor spelling.

    Example line: "        START_TYPE         : 2   AUTO_START"
    """
    raw = parse_sc_fields(output).get("START_TYPE", "")
    token = next((p for p in raw.split() if p in _SC_START_TYPES), None)
    if token is None:
        raise CapabilityUnavailableError(
            "Unrecognized START_TYPE in sc qc output",
            details={"start_type": raw},
        )
    return _SC_START_TYPES[token]


def parse_sc_query(output: str) -> str:
    """
    Return the run state from `sc query` output ("Running", "Stopped", "StartPending", ...).

    Example line: "        STATE              : 4  RUNNING"
    """
    raw = parse_sc_fields(output).get("STATE", "")
    parts = raw.split()
    if len(parts) < 2:
        raise CapabilityUnavailableError(
            "Unrecognized STATE in sc query output",
            details={"state": raw},
        )
    return "".join(word.capitalize() for word in parts[1].split("_"))


def parse_scheme_guid(output: str) -> Optional[str]:
    """Extract the first scheme GUID from powercfg output."""
    m = _GUID_RE.search(output)
    if not m:
        return None
    return m.group(0).lower()


def split_registry_path(path: str) -> tuple[str, str]:
    """Split "HKLM\\SOFTWARE\\..." into ("HKLM", "SOFTWARE\\...")."""
    hive, sep, subkey = path.partition("\\")
    if not sep or not subkey:
        raise InvalidArgumentError(f"Registry path must include a hive and subkey: {path}")
    return hive.upper(), subkey


class WindowsHost:
    """
    Concrete HostAccessor for the local Windows machine.

    Notes:
        - Only REG_DWORD (Int) and REG_SZ (String) values are supported.
        - Service and power changes shell out to sc.exe / powercfg.exe.
    """

    def __init__(self) -> None:
        if not sys.platform.startswith("win"):
            raise PreconditionFailedError(
                "wintune can only modify a Windows host",
                details={"platform": sys.platform},
            )
        import winreg

        self._winreg = winreg
        self._hives: dict[str, Any] = {
            "HKLM": winreg.HKEY_LOCAL_MACHINE,
            "HKEY_LOCAL_MACHINE": winreg.HKEY_LOCAL_MACHINE,
            "HKCU": winreg.HKEY_CURRENT_USER,
            "HKEY_CURRENT_USER": winreg.HKEY_CURRENT_USER,
        }

    # ----------------------------
    # Registry
    # ----------------------------
    def read_config_value(self, path: str, name: str) -> ConfigValue:
        hive, subkey = self._open_args(path)
        target = f"{path}\\{name}"
        try:
            with self._winreg.OpenKey(hive, subkey, 0, self._winreg.KEY_READ) as key:
                value, reg_type = self._winreg.QueryValueEx(key, name)
        except FileNotFoundError:
            return ConfigValue(exists=False)
        except OSError as exc:
            raise CapabilityUnavailableError(
                f"Cannot read {target}: {exc}",
                details={"path": path, "name": name},
                cause=exc,
            ) from exc

        if reg_type == self._winreg.REG_DWORD:
            return ConfigValue(exists=True, value=int(value), value_type="Int")
        if reg_type == self._winreg.REG_SZ:
            return ConfigValue(exists=True, value=str(value), value_type="String")

        raise CapabilityUnavailableError(
            f"Unsupported registry type {reg_type} for {target}",
            details={"path": path, "name": name, "reg_type": reg_type},
        )

    def write_config_value(self, path: str, name: str, value_type: str, value: ConfigScalar) -> None:
        hive, subkey = self._open_args(path)
        if value_type == "Int":
            reg_type, data = self._winreg.REG_DWORD, int(value)
        elif value_type == "String":
            reg_type, data = self._winreg.REG_SZ, str(value)
        else:
            raise InvalidArgumentError(f"Unsupported value type: {value_type}")

        try:
            with self._winreg.CreateKeyEx(hive, subkey, 0, self._winreg.KEY_SET_VALUE) as key:
                self._winreg.SetValueEx(key, name, 0, reg_type, data)
        except OSError as exc:
            raise map_os_error(exc, operation="write", target=f"{path}\\{name}") from exc

    def remove_config_value(self, path: str, name: str) -> None:
        hive, subkey = self._open_args(path)
        try:
            with self._winreg.OpenKey(hive, subkey, 0, self._winreg.KEY_SET_VALUE) as key:
                self._winreg.DeleteValue(key, name)
        except FileNotFoundError:
            logger.debug("%s\\%s already absent", path, name)
        except OSError as exc:
            raise map_os_error(exc, operation="remove", target=f"{path}\\{name}") from exc

    # ----------------------------
    # Services
    # ----------------------------
    def read_service_state(self, name: str) -> Optional[ServiceStatus]:
        qc = self._read_run(["sc.exe", "qc", name], target=name)
        if qc.returncode == _SC_SERVICE_DOES_NOT_EXIST:
            return None
        if qc.returncode != 0:
            raise CapabilityUnavailableError(
                f"sc qc {name} exited {qc.returncode}",
                details={"service": name, "output": qc.stdout.strip()},
            )

        query = self._read_run(["sc.exe", "query", name], target=name)
        if query.returncode != 0:
            raise CapabilityUnavailableError(
                f"sc query {name} exited {query.returncode}",
                details={"service": name, "output": query.stdout.strip()},
            )

        return ServiceStatus(start_mode=parse_sc_qc(qc.stdout), run_state=parse_sc_query(query.stdout))

    def set_service_state(self, name: str, start_mode: str, run_state: str) -> None:
        sc_start = _SC_CONFIG_START.get(start_mode.lower())
        if sc_start is None:
            raise InvalidArgumentError(f"Unsupported start mode: {start_mode}")

        self._check(["sc.exe", "config", name, "start=", sc_start], target=name)

        if run_state == "Running":
            self._check(["sc.exe", "start", name], target=name, ok_codes=(_SC_ALREADY_RUNNING,))
        else:
            self._check(["sc.exe", "stop", name], target=name, ok_codes=(_SC_NOT_ACTIVE,))

    # ----------------------------
    # Power schemes
    # ----------------------------
    def read_active_power_scheme_id(self) -> Optional[str]:
        result = self._read_run(["powercfg.exe", "/getactivescheme"], target="active power scheme")
        if result.returncode != 0:
            return None
        return parse_scheme_guid(result.stdout)

    def set_active_power_scheme_id(self, scheme_id: str) -> None:
        self._check(["powercfg.exe", "/setactive", scheme_id], target=scheme_id)

    def create_scheme_from_template(self, template_id: str) -> str:
        result = self._check(["powercfg.exe", "-duplicatescheme", template_id], target=template_id)
        scheme_id = parse_scheme_guid(result.stdout)
        if scheme_id is None:
            raise ApplyError(
                "powercfg did not report the duplicated scheme id",
                details={"template_id": template_id, "output": result.stdout.strip()},
            )
        return scheme_id

    # ----------------------------
    # Reports / environment
    # ----------------------------
    def list_startup_entries(self) -> list[StartupEntry]:
        entries: list[StartupEntry] = []
        for path in _RUN_KEYS:
            hive, subkey = self._open_args(path)
            try:
                with self._winreg.OpenKey(hive, subkey, 0, self._winreg.KEY_READ) as key:
                    index = 0
                    while True:
                        try:
                            value_name, data, _ = self._winreg.EnumValue(key, index)
                        except OSError:
                            break
                        entries.append(StartupEntry(name=value_name, command=str(data), location=path))
                        index += 1
            except FileNotFoundError:
                continue
        return entries

    def is_elevated(self) -> bool:
        import ctypes

        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except OSError:
            return False

    def create_restore_point(self, description: str) -> None:
        command = (
            f"Checkpoint-Computer -Description '{description}' "
            "-RestorePointType MODIFY_SETTINGS -ErrorAction Stop"
        )
        self._check(["powershell.exe", "-NoProfile", "-Command", command], target="restore point")

    # ----------------------------
    # Internals
    # ----------------------------
    def _open_args(self, path: str) -> tuple[Any, str]:
        hive_name, subkey = split_registry_path(path)
        hive = self._hives.get(hive_name)
        if hive is None:
            raise InvalidArgumentError(f"Unsupported registry hive: {hive_name}")
        return hive, subkey

    def _run(self, cmd: Sequence[str]) -> subprocess.CompletedProcess:
        logger.debug("Running: %s", " ".join(cmd))
        try:
            return subprocess.run(list(cmd), capture_output=True, text=True, check=False)
        except OSError as exc:
            raise map_os_error(exc, operation="run", target=cmd[0]) from exc

    def _read_run(self, cmd: Sequence[str], *, target: str) -> subprocess.CompletedProcess:
        """Run a read-only command; any failure to run it means the target cannot be read."""
        try:
            return self._run(cmd)
        except CapabilityUnavailableError:
            raise
        except WinTuneError as exc:
            raise CapabilityUnavailableError(
                f"Cannot read {target}: {exc}",
                details={"command": list(cmd), **exc.details},
                cause=exc,
            ) from exc

    def _check(
        self,
        cmd: Sequence[str],
        *,
        target: str,
        ok_codes: Sequence[int] = (),
    ) -> subprocess.CompletedProcess:
        result = self._run(cmd)
        if result.returncode == 0 or result.returncode in ok_codes:
            return result
        if result.returncode == 5:
            raise PermissionDeniedError(
                f"{cmd[0]} access denied for {target}",
                details={"command": list(cmd)},
            )
        raise ApplyError(
            f"{' '.join(cmd)} exited {result.returncode}",
            details={"command": list(cmd), "output": (result.stdout or result.stderr).strip()},
        )
