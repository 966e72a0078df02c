"""Run-directory artifacts: snapshots and the startup-entries report."""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from wintune.errors import WinTuneError
from wintune.host.accessor import HostAccessor
from wintune.plan import ReportKind, SnapshotStage, snapshot_targets
from wintune.util.time import now_local, to_iso

logger = logging.getLogger(__name__)

STARTUP_REPORT_NAME: str = "startup-entries.csv"

SNAPSHOT_FILE_NAMES: dict[SnapshotStage, str] = {
    SnapshotStage.BEFORE: "snapshot-before.json",
    SnapshotStage.AFTER: "snapshot-after.json",
}

REPORT_FILE_NAMES: dict[ReportKind, str] = {
    ReportKind.STARTUP_ENTRIES: STARTUP_REPORT_NAME,
}


def collect_snapshot(host: HostAccessor) -> dict[str, Any]:
    """
    Read every catalog target from the host.

    A failed read is recorded inline as {"error": "..."} so one unreadable
    target does not lose the rest of the snapshot.
    """
    targets = snapshot_targets()

    registry: list[dict[str, Any]] = []
    for path, name in targets.registry:
        entry: dict[str, Any] = {"path": path, "name": name}
        try:
            entry.update(asdict(host.read_config_value(path, name)))
        except (WinTuneError, OSError) as exc:
            entry["error"] = str(exc)
        registry.append(entry)

    services: list[dict[str, Any]] = []
    for name in targets.services:
        svc: dict[str, Any] = {"name": name}
        try:
            status = host.read_service_state(name)
            if status is None:
                svc["exists"] = False
            else:
                svc.update({"exists": True, **asdict(status)})
        except (WinTuneError, OSError) as exc:
            svc["error"] = str(exc)
        services.append(svc)

    power: dict[str, Any] = {}
    try:
        power["active_scheme_id"] = host.read_active_power_scheme_id()
    except (WinTuneError, OSError) as exc:
        power["error"] = str(exc)

    return {
        "taken_at": to_iso(now_local()),
        "registry": registry,
        "services": services,
        "power": power,
    }


def write_snapshot(run_dir: Path, stage: SnapshotStage, snapshot: dict[str, Any]) -> Path:
    path = run_dir / SNAPSHOT_FILE_NAMES[stage]
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(snapshot, fh, indent=2)
        fh.write("\n")
    logger.info("Wrote %s", path)
    return path


def write_startup_entries(run_dir: Path, host: HostAccessor) -> Path:
    path = run_dir / REPORT_FILE_NAMES[ReportKind.STARTUP_ENTRIES]
    entries = host.list_startup_entries()
    with open(path, "w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=["name", "command", "location"])
        writer.writeheader()
        for entry in entries:
            writer.writerow(asdict(entry))
    logger.info("Wrote %d startup entries to %s", len(entries), path)
    return path
