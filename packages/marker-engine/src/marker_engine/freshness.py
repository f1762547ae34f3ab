from __future__ import annotations

from datetime import datetime, timedelta

from devkit.clock import to_utc

FRESHNESS_WINDOW = timedelta(hours=24)


def freshness_cutoff(now: datetime) -> datetime:
    return to_utc(now) - FRESHNESS_WINDOW


def is_fresh(timestamp: datetime, now: datetime) -> bool:
    return to_utc(timestamp) >= freshness_cutoff(now)
