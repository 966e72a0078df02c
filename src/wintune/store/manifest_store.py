"""ManifestStore: run-scoped persistence of manifests and results."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from wintune.errors import InvalidStateError, ManifestCorruptError, ManifestMissingError
from wintune.models import ActionResult
from wintune.util.time import is_run_id, new_run_id, now_local, to_iso

from .codec import result_from_dict, result_to_dict
from .manifest import RunManifest

logger = logging.getLogger(__name__)

MANIFEST_NAME: str = "manifest.json"
RESULTS_NAME: str = "results.json"
REVERT_RESULTS_NAME: str = "revert-results.json"
TRANSCRIPT_NAME: str = "transcript.log"


class ManifestStore:
    """
    Persist one directory per run under a backup root.

    Layout:
        <root>/<YYYY-MM-DD_HHMMSS>/manifest.json
                                  /results.json
                                  /revert-results.json
                                  /snapshot-before.json, snapshot-after.json
                                  /startup-entries.csv
                                  /transcript.log

    No locking: two concurrent runs against one root may collide on the run
    directory name, which surfaces as InvalidStateError from create_run.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    # ----------------------------
    # Run directories
    # ----------------------------
    def create_run(self, now: Optional[datetime] = None) -> Path:
        """
        Create a fresh run directory named after the local timestamp.

        Raises:
            InvalidStateError: if a directory with that name already exists.
        """
        run_dir = self.root / new_run_id(now)
        self.root.mkdir(parents=True, exist_ok=True)
        try:
            run_dir.mkdir()
        except FileExistsError as exc:
            raise InvalidStateError(
                "Run directory already exists; refusing to reuse it",
                details={"run_dir": str(run_dir)},
                cause=exc,
            ) from exc
        logger.debug("Created run directory %s", run_dir)
        return run_dir

    def list_runs(self) -> list[Path]:
        """Run directories under root, oldest first."""
        if not self.root.is_dir():
            return []
        runs = [p for p in self.root.iterdir() if p.is_dir() and is_run_id(p.name)]
        return sorted(runs, key=lambda p: p.name)

    def latest_run_dir(self) -> Path:
        """
        Return the most recent run: the lexicographically greatest run directory name.

        Raises:
            ManifestMissingError: if no run directory exists.
        """
        runs = self.list_runs()
        if not runs:
            raise ManifestMissingError(
                "No previous runs found under backup root",
                details={"root": str(self.root)},
            )
        return runs[-1]

    def resolve_run_dir(self, explicit: Optional[Path] = None) -> Path:
        if explicit is not None:
            return Path(explicit)
        return self.latest_run_dir()

    # ----------------------------
    # Manifest
    # ----------------------------
    def save_manifest(self, run_dir: Path, manifest: RunManifest) -> Path:
        path = run_dir / MANIFEST_NAME
        _write_json(path, manifest.to_dict())
        logger.info("Manifest written to %s", path)
        return path

    def load_manifest(self, run_dir: Path) -> RunManifest:
        """
        Raises:
            ManifestMissingError: if manifest.json does not exist.
            ManifestCorruptError: if it is not valid JSON or not a valid manifest.
        """
        path = Path(run_dir) / MANIFEST_NAME
        if not path.is_file():
            raise ManifestMissingError(
                "No manifest found for run",
                details={"path": str(path)},
            )
        try:
            with open(path, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise ManifestCorruptError(
                "Manifest could not be read",
                details={"path": str(path)},
                cause=exc,
            ) from exc

        return RunManifest.from_dict(data)

    # ----------------------------
    # Results
    # ----------------------------
    def save_results(self, run_dir: Path, run_id: str, results: list[ActionResult]) -> Path:
        """
        Write results.json: {run_id, mode, completed_at, results: [...]}.

        Each entry has seq, feature, action_type, status, error_type,
        error_message and detail. status is OK, FAILED or SKIPPED (SKIPPED marks
        dry-run previews and revert no-ops). Entries with seq >= the number of
        manifest actions are features whose previous state could not be read.
        """
        return self._save_results(run_dir / RESULTS_NAME, run_id, "apply", results)

    def save_revert_results(self, run_dir: Path, run_id: str, results: list[ActionResult]) -> Path:
        return self._save_results(run_dir / REVERT_RESULTS_NAME, run_id, "revert", results)

    def load_results(self, run_dir: Path, *, revert: bool = False) -> list[ActionResult]:
        path = Path(run_dir) / (REVERT_RESULTS_NAME if revert else RESULTS_NAME)
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        return [result_from_dict(r) for r in data["results"]]

    def _save_results(self, path: Path, run_id: str, mode: str, results: list[ActionResult]) -> Path:
        _write_json(
            path,
            {
                "run_id": run_id,
                "mode": mode,
                "completed_at": to_iso(now_local()),
                "results": [result_to_dict(r) for r in results],
            },
        )
        logger.info("Results written to %s", path)
        return path


def _write_json(path: Path, data: Any) -> None:
    """Write JSON via a temp file and atomic replace."""
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2)
        fh.write("\n")
        fh.flush()
        os.fsync(fh.fileno())
    os.replace(tmp, path)
