"""Explicit per-invocation context passed to builder, executor and reverter."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from wintune.plan.features import Feature, Profile


@dataclass(slots=True, frozen=True)
class RunContext:
    """
    Everything a component needs to know about the current invocation.

    Notes:
        - run_dir is None for dry runs (nothing is persisted) and before the
          run directory is created.
        - force is accepted and recorded but currently has no effect.
    """

    profile: Profile
    features: tuple[Feature, ...]
    dry_run: bool = False
    force: bool = False
    run_dir: Optional[Path] = None

    def with_run_dir(self, run_dir: Path) -> RunContext:
        return replace(self, run_dir=run_dir)
