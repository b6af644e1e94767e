"""UTC clock helpers for run ids, log lines and durations."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def utc_timestamp_iso() -> str:
    return utc_now().isoformat(timespec="milliseconds")


def generate_run_id() -> str:
    # Sortable by start time, unique per process start.
    return utc_now().strftime("run-%Y%m%dT%H%M%S%fZ")


def elapsed_ms(started_at: float) -> int:
    """Milliseconds since a ``time.monotonic()`` reading."""
    return int((time.monotonic() - started_at) * 1000)
