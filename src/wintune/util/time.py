from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

RUN_ID_FORMAT: str = "%Y-%m-%d_%H%M%S"
RUN_ID_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}_\d{6}$")


def now_local() -> datetime:
    """Return current local time as a tz-aware datetime."""
    return datetime.now(timezone.utc).astimezone()


def new_run_id(now: Optional[datetime] = None) -> str:
    """
    Build a run identifier from local time: YYYY-MM-DD_HHMMSS.

    The format sorts lexicographically in chronological order.
    """
    return (now or now_local()).strftime(RUN_ID_FORMAT)


def is_run_id(value: str) -> bool:
    return bool(RUN_ID_PATTERN.match(value))


def to_iso(dt: datetime) -> str:
    """Convert tz-aware datetime to ISO 8601 with offset (seconds precision)."""
    return normalize_dt(dt).isoformat(timespec="seconds")


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into a tz-aware datetime.

    Accepts a trailing 'Z' for UTC.
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"not an ISO 8601 timestamp: {value!r}")

    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    return normalize_dt(datetime.fromisoformat(s))


def normalize_dt(dt: datetime) -> datetime:
    """Return dt unchanged if it carries a timezone; run timestamps are never naive."""
    if not isinstance(dt, datetime):
        raise TypeError(f"expected datetime, got {type(dt).__name__}")
    if dt.tzinfo is None:
        raise ValueError("run timestamps must be timezone-aware")
    return dt
