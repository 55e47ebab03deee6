"""
Time helpers for signal-age calculations.

Signal timestamps arrive from the analysis backend as Unix epoch
milliseconds; everything here works in that unit.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

MS_PER_HOUR = 3_600_000


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(utcnow().timestamp() * 1000)


def to_epoch_ms(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds; naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def hours_since(timestamp_ms: float, reference_ms: Optional[float] = None) -> float:
    """Hours elapsed from ``timestamp_ms`` to ``reference_ms`` (default: now).

    Negative when the timestamp lies in the future.
    """
    ref = now_ms() if reference_ms is None else reference_ms
    return (ref - timestamp_ms) / MS_PER_HOUR
