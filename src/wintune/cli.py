"""Command line entry point for wintune."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from wintune.config import load_settings
from wintune.errors import WinTuneError
from wintune.log import configure_logging
from wintune.manager import TuneManager
from wintune.models import RunResult
from wintune.plan import Feature, Profile, normalize_features

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_ACTION_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wintune",
        description="Apply curated Windows configuration features and revert them later.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  wintune --profile Gaming                    # apply the Gaming profile defaults
  wintune --features Widgets Tips PowerPlan   # apply selected features only
  wintune --profile Gaming --dry-run          # preview without changes
  wintune --revert                            # revert the most recent run
  wintune --revert --run-dir D:\\wt\\2026-01-30_153012
""",
    )
    p.add_argument(
        "--profile",
        choices=[prof.value for prof in Profile],
        default=Profile.OFFICE.value,
        help="device profile (default: Office)",
    )
    p.add_argument(
        "--features",
        nargs="+",
        metavar="FEATURE",
        default=[],
        help="features to apply, in order (default: the profile's features); "
             f"one of: {', '.join(f.value for f in Feature)}",
    )
    p.add_argument(
        "--revert",
        action="store_true",
        help="revert a previous run (the most recent unless --run-dir is given)",
    )
    p.add_argument("--run-dir", type=Path, help="run directory to revert")
    p.add_argument("--backup-root", type=Path, help="directory holding run directories")
    p.add_argument("--dry-run", action="store_true", help="show what would change without changing it")
    p.add_argument("--force", action="store_true", help="reserved; currently has no effect")
    p.add_argument(
        "--restore-point",
        action="store_true",
        help="create a system restore point before applying",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    p.add_argument("-q", "--quiet", action="store_true", help="log warnings and errors only")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        features = normalize_features(args.features)
    except WinTuneError as exc:
        parser.error(str(exc))

    if args.run_dir is not None and not args.revert:
        parser.error("--run-dir requires --revert")

    try:
        settings = load_settings(backup_root=args.backup_root)
    except ValueError as exc:
        parser.error(str(exc))

    level = settings.log_level_number
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    log = configure_logging(level)

    try:
        manager = TuneManager(settings)
        if args.revert:
            result = manager.revert(args.run_dir, dry_run=args.dry_run)
        else:
            result = manager.apply(
                args.profile,
                features,
                dry_run=args.dry_run,
                force=args.force,
                restore_point=args.restore_point,
            )
    except WinTuneError as exc:
        log.error("%s", exc)
        return EXIT_FATAL

    _print_summary(result)
    return EXIT_ACTION_FAILED if result.failed else EXIT_OK


def _print_summary(result: RunResult) -> None:
    title = f"{result.mode}{' (dry run)' if result.dry_run else ''}"
    print(f"\n{title}: " + ", ".join(f"{k}={v}" for k, v in result.summary.items()))
    for r in result.results:
        line = f"  {r.status:<7} {r.feature:<22} {r.action_type:<15}"
        if r.error_message:
            line += f" {r.error_message}"
        elif r.detail:
            line += f" {r.detail}"
        print(line)
    if result.run_dir is not None:
        print(f"\nrun directory: {result.run_dir}")


if __name__ == "__main__":
    sys.exit(main())
