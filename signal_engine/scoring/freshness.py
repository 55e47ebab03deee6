"""
Signal freshness classification.

Tiers (age in hours, lower bound inclusive)
-------------------------------------------
  "new"    — age < 2
  "fresh"  — 2  <= age < 6
  "recent" — 6  <= age < 24
  "stale"  — age >= 24

Bounds come from ``FreshnessConfig``. The result depends on wall-clock time
at call time, so the same timestamp decays through the tiers as it ages;
pass ``now_ms`` to pin the clock.

Timestamps in the future (negative age, e.g. clock skew) classify as "new".
"""

from __future__ import annotations

from typing import Optional

from signal_engine.config import DEFAULT_CONFIG, FreshnessConfig
from signal_engine.taxonomy.signal_taxonomy import FreshnessTier
from signal_engine.utils import time_utils


def get_signal_freshness(
    signal_timestamp_ms: float,
    now_ms: Optional[float] = None,
    config: Optional[FreshnessConfig] = None,
) -> FreshnessTier:
    """Bucket a signal's age into a ``FreshnessTier``.

    Args:
        signal_timestamp_ms: When the signal was produced (epoch ms).
        now_ms:              Reference time (epoch ms); defaults to now.
        config:              Tier bounds; defaults to 2h / 6h / 24h.

    Returns:
        FreshnessTier enum member.
    """
    cfg = config or DEFAULT_CONFIG.freshness
    age_hours = time_utils.hours_since(signal_timestamp_ms, now_ms)

    if age_hours < cfg.new_hours:
        return FreshnessTier.NEW
    if age_hours < cfg.fresh_hours:
        return FreshnessTier.FRESH
    if age_hours < cfg.recent_hours:
        return FreshnessTier.RECENT
    return FreshnessTier.STALE


def format_time_ago(timestamp_ms: float, reference_ms: Optional[float] = None) -> str:
    """Short relative-age label: "Just now", "5m ago", "3h ago", "2d ago".

    Anything a week or older is "Long time ago".
    """
    ref = time_utils.now_ms() if reference_ms is None else reference_ms
    seconds = int((ref - timestamp_ms) // 1000)
    minutes = seconds // 60
    hours = int((ref - timestamp_ms) // time_utils.MS_PER_HOUR)
    days = hours // 24

    if seconds < 60:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return "Long time ago"
