"""
Signal distribution: count tickers per recommendation bucket.

Bucketing goes through ``scoring.hybrid.classify_action()`` so the counts
always agree with the action each ticker's recommendation carries.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Iterable, Optional

from signal_engine.config import ActionThresholds
from signal_engine.models.signals import SignalDistribution
from signal_engine.scoring.hybrid import classify_action
from signal_engine.taxonomy.signal_taxonomy import RecommendationAction


def _hybrid_score_of(item: Any) -> float:
    """Read the hybrid score from a mapping or an object.

    Accepts ``hybrid_score`` (snake case) or ``hybridScore`` (dashboard
    camel case) keys, or a ``hybrid_score`` attribute.
    """
    if isinstance(item, dict):
        if "hybrid_score" in item:
            return item["hybrid_score"]
        return item["hybridScore"]
    return item.hybrid_score


def calculate_signal_distribution(
    items: Iterable[Any],
    thresholds: Optional[ActionThresholds] = None,
) -> SignalDistribution:
    """Count items into strong_buy / buy / hold / sell / strong_sell buckets.

    Args:
        items:      Records exposing a hybrid score (dicts or ``EnrichedTicker``).
        thresholds: Bucket bounds; defaults to the shared 80/65/40/25 table.

    Returns:
        ``SignalDistribution`` whose bucket counts sum to ``total``.

    Raises:
        KeyError / AttributeError: If an item carries no hybrid score.
    """
    items = list(items)
    counts: Counter[RecommendationAction] = Counter(
        classify_action(_hybrid_score_of(item), thresholds) for item in items
    )
    return SignalDistribution(
        strong_buy=counts[RecommendationAction.STRONG_BUY],
        buy=counts[RecommendationAction.BUY],
        hold=counts[RecommendationAction.HOLD],
        sell=counts[RecommendationAction.SELL],
        strong_sell=counts[RecommendationAction.STRONG_SELL],
        total=len(items),
    )
