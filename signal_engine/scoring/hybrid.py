"""
Hybrid score calculation and action bucketing.

Score formula
-------------
    score = round(technical_rating * technical_weight
                  + sentiment_rating * sentiment_weight)

clamped to [0, 100]. Default weights favour sentiment (0.55) over
technical (0.45); both come from ``HybridConfig``.

Action buckets (lower bounds, from ``ActionThresholds``)
--------------------------------------------------------
    score >= 80  → strong_buy
    score >= 65  → buy
    score >= 40  → hold
    score >= 25  → sell
    otherwise    → strong_sell

``classify_action()`` is the only place these bounds are evaluated; the
recommendation generator and the distribution aggregator both call it.
"""

from __future__ import annotations

from typing import Optional

from signal_engine.config import DEFAULT_CONFIG, ActionThresholds
from signal_engine.models.signals import HybridScore, HybridWeights
from signal_engine.taxonomy.signal_taxonomy import RecommendationAction
from signal_engine.utils.numeric import clamp, round_half_up


def calculate_hybrid_score(
    technical_rating: float,
    sentiment_rating: float,
    technical_weight: Optional[float] = None,
    sentiment_weight: Optional[float] = None,
) -> HybridScore:
    """Fuse a technical and a sentiment rating into one 0–100 score.

    Args:
        technical_rating: Technical rating, nominally 0–100.
        sentiment_rating: Sentiment rating, nominally 0–100.
        technical_weight: Weight for the technical rating (default 0.45).
        sentiment_weight: Weight for the sentiment rating (default 0.55).

    Returns:
        ``HybridScore`` with the clamped integer score and the weights used.
    """
    if technical_weight is None:
        technical_weight = DEFAULT_CONFIG.hybrid.technical_weight
    if sentiment_weight is None:
        sentiment_weight = DEFAULT_CONFIG.hybrid.sentiment_weight

    raw = technical_rating * technical_weight + sentiment_rating * sentiment_weight
    # Clamp before rounding so infinite inputs still land in range.
    score = round_half_up(clamp(raw, 0.0, 100.0))

    return HybridScore(
        score=score,
        weights=HybridWeights(technical=technical_weight, sentiment=sentiment_weight),
    )


def classify_action(
    hybrid_score: float,
    thresholds: Optional[ActionThresholds] = None,
) -> RecommendationAction:
    """Map a hybrid score to its action bucket (first lower bound met wins)."""
    thresholds = thresholds or DEFAULT_CONFIG.thresholds
    for lower_bound, action in thresholds.buckets():
        if hybrid_score >= lower_bound:
            return action
    return RecommendationAction.STRONG_SELL
