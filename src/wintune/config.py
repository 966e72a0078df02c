"""Settings for wintune (backup root and log level)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

ENV_BACKUP_ROOT: str = "WINTUNE_BACKUP_ROOT"
ENV_LOG_LEVEL: str = "WINTUNE_LOG_LEVEL"

_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(slots=True, frozen=True)
class Settings:
    """
    Resolved settings.

    backup_root holds one directory per run; log_level is a logging level name.
    """

    backup_root: Path
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not isinstance(self.backup_root, Path):
            raise TypeError("Settings.backup_root must be a pathlib.Path")
        if not str(self.backup_root).strip():
            raise ValueError("Settings.backup_root must be non-empty")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"Settings.log_level must be one of {', '.join(_LOG_LEVELS)}")

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


def default_backup_root(environ: Mapping[str, str]) -> Path:
    program_data = environ.get("ProgramData") or environ.get("PROGRAMDATA")
    if program_data:
        return Path(program_data) / "wintune" / "backups"
    return Path.home() / ".wintune" / "backups"


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    *,
    backup_root: Optional[Path] = None,
) -> Settings:
    """
    Resolve settings.

    Precedence for backup_root: explicit argument, WINTUNE_BACKUP_ROOT,
    %ProgramData%\\wintune\\backups, ~/.wintune/backups.
    """
    env = os.environ if environ is None else environ

    if backup_root is not None:
        root = Path(backup_root)
    elif env.get(ENV_BACKUP_ROOT, "").strip():
        root = Path(env[ENV_BACKUP_ROOT].strip())
    else:
        root = default_backup_root(env)

    level = env.get(ENV_LOG_LEVEL, "INFO").strip().upper() or "INFO"
    return Settings(backup_root=root, log_level=level)
