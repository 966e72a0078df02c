"""TuneManager: orchestrates Plan -> Manifest -> Apply -> Results, and Revert."""

from __future__ import annotations

import getpass
import logging
import socket
from pathlib import Path
from typing import Iterable, Optional, Union

from wintune.config import Settings
from wintune.context import RunContext
from wintune.engine import Executor, Reverter, capture_failure_results
from wintune.errors import PreconditionFailedError, WinTuneError
from wintune.host import HostAccessor, WindowsHost
from wintune.log import transcript
from wintune.models import RunResult, summarize_results
from wintune.plan import Action, Feature, Profile, build_plan, collect_plan, features_for, parse_profile
from wintune.store import TRANSCRIPT_NAME, ManifestStore, RunManifest
from wintune.util.time import now_local

logger = logging.getLogger(__name__)

RESTORE_POINT_DESCRIPTION: str = "wintune before apply"


class TuneManager:
    """High-level manager for a single host: Plan -> Apply, and Revert."""

    def __init__(self, settings: Settings) -> None:
        self._host: HostAccessor = WindowsHost()
        self._settings = settings
        self._store = ManifestStore(settings.backup_root)

    @classmethod
    def from_host(cls, host: HostAccessor, settings: Settings) -> "TuneManager":
        """Create manager with an injected host accessor (useful for tests)."""
        obj = cls.__new__(cls)
        obj._host = host
        obj._settings = settings
        obj._store = ManifestStore(settings.backup_root)
        return obj

    @property
    def store(self) -> ManifestStore:
        return self._store

    def check_preconditions(self, *, dry_run: bool) -> None:
        """
        Raises:
            PreconditionFailedError: if not elevated (dry runs are exempt).
        """
        if dry_run:
            return
        if not self._host.is_elevated():
            raise PreconditionFailedError("wintune must run elevated (Run as administrator)")

    def build_plan(self, ctx: RunContext) -> list[Action]:
        return build_plan(self._host, ctx)

    def apply(
        self,
        profile: Union[str, Profile],
        features: Iterable[Union[str, Feature]] = (),
        *,
        dry_run: bool = False,
        force: bool = False,
        restore_point: bool = False,
    ) -> RunResult:
        """
        Build a plan and apply it.

        Order (non-dry-run):
            preconditions -> plan -> run dir -> manifest.json -> restore point
            -> execute -> results.json

        Features whose previous state cannot be read are left out of the plan
        and manifest and reported as FAILED results after the plan's own.

        Dry run builds the plan and previews it; nothing is persisted.

        Raises:
            PreconditionFailedError: if the host is not elevated.
            InvalidArgumentError: on an unknown profile or feature name.
        """
        prof = parse_profile(profile)
        ctx = RunContext(
            profile=prof,
            features=features_for(prof, features),
            dry_run=dry_run,
            force=force,
        )
        if force:
            logger.debug("--force given; it currently has no effect")

        self.check_preconditions(dry_run=dry_run)
        logger.info(
            "Profile %s, features: %s",
            ctx.profile.value,
            ", ".join(f.value for f in ctx.features) or "(none)",
        )

        build = collect_plan(self._host, ctx)
        plan = build.actions

        if dry_run:
            results = Executor(self._host, ctx).execute(plan)
            results.extend(capture_failure_results(len(plan), build.failures))
            return RunResult(
                mode="apply",
                dry_run=True,
                results=results,
                summary=summarize_results(results),
            )

        created_at = now_local()
        run_dir = self._store.create_run(created_at)
        ctx = ctx.with_run_dir(run_dir)
        manifest = RunManifest(
            run_id=run_dir.name,
            created_at=created_at,
            host=socket.gethostname(),
            user=_current_user(),
            profile=ctx.profile.value,
            features=[f.value for f in ctx.features],
            actions=plan,
        )
        self._store.save_manifest(run_dir, manifest)

        with transcript(run_dir / TRANSCRIPT_NAME):
            logger.info("Run %s: %d actions", manifest.run_id, len(plan))
            if restore_point:
                self._create_restore_point()
            for failure in build.failures:
                logger.error("%s not applied: %s", failure.feature, failure.error)
            results = Executor(self._host, ctx).execute(plan)
            results.extend(capture_failure_results(len(plan), build.failures))
            self._store.save_results(run_dir, manifest.run_id, results)

        summary = summarize_results(results)
        logger.info("Apply finished: %s", _format_summary(summary))
        return RunResult(
            mode="apply",
            dry_run=False,
            results=results,
            run_id=manifest.run_id,
            run_dir=run_dir,
            summary=summary,
        )

    def revert(self, run_dir: Optional[Path] = None, *, dry_run: bool = False) -> RunResult:
        """
        Revert a prior run (latest when run_dir is None).

        Raises:
            ManifestMissingError / ManifestCorruptError: before any action is attempted.
            PreconditionFailedError: if the host is not elevated.
        """
        target = self._store.resolve_run_dir(run_dir)
        manifest = self._store.load_manifest(target)
        self.check_preconditions(dry_run=dry_run)

        ctx = RunContext(
            profile=parse_profile(manifest.profile),
            features=(),
            dry_run=dry_run,
            run_dir=target,
        )
        logger.info(
            "Reverting run %s (profile %s, created %s by %s on %s)",
            manifest.run_id,
            manifest.profile,
            manifest.created_at.isoformat(),
            manifest.user,
            manifest.host,
        )

        if dry_run:
            results = Reverter(self._host, ctx).revert(manifest.actions)
            return RunResult(
                mode="revert",
                dry_run=True,
                results=results,
                run_id=manifest.run_id,
                run_dir=target,
                summary=summarize_results(results),
            )

        with transcript(target / TRANSCRIPT_NAME):
            results = Reverter(self._host, ctx).revert(manifest.actions)
            self._store.save_revert_results(target, manifest.run_id, results)

        summary = summarize_results(results)
        logger.info("Revert finished: %s", _format_summary(summary))
        return RunResult(
            mode="revert",
            dry_run=False,
            results=results,
            run_id=manifest.run_id,
            run_dir=target,
            summary=summary,
        )

    # ----------------------------
    # Internals
    # ----------------------------
    def _create_restore_point(self) -> None:
        try:
            self._host.create_restore_point(RESTORE_POINT_DESCRIPTION)
        except (WinTuneError, OSError) as exc:
            logger.warning("Restore point not created: %s", exc)
            return
        logger.info("Restore point created")


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def _format_summary(summary: dict[str, int]) -> str:
    return ", ".join(f"{status}={count}" for status, count in summary.items())
