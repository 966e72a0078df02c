from .time import (
    RUN_ID_FORMAT,
    RUN_ID_PATTERN,
    is_run_id,
    new_run_id,
    normalize_dt,
    now_local,
    parse_iso,
    to_iso,
)

__all__ = [
    "RUN_ID_FORMAT",
    "RUN_ID_PATTERN",
    "is_run_id",
    "new_run_id",
    "now_local",
    "to_iso",
    "parse_iso",
    "normalize_dt",
]
