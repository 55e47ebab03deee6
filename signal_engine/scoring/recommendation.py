"""
Recommendation generation: hybrid score + supporting signals → action,
confidence and ordered reasons.

Confidence
----------
Starts at ``ConfidenceConfig.baseline`` (50). Each rule from
``rules.default_rules()`` contributes a delta and its reasons in pipeline
order; the sum is clamped to [0, 100] once, at the end.

Action
------
Bucketed from the hybrid score alone via ``classify_action()``; confidence
never changes the action.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from signal_engine.config import DEFAULT_CONFIG, AppConfig
from signal_engine.models.signals import Recommendation
from signal_engine.scoring.hybrid import classify_action
from signal_engine.scoring.rules import ConfidenceRule, SignalContext, default_rules
from signal_engine.taxonomy.signal_taxonomy import MentionVelocity, SignalDirection
from signal_engine.utils.numeric import clamp

logger = logging.getLogger(__name__)


def generate_recommendation(
    hybrid_score:     float,
    technical_rating: float,
    sentiment_rating: float,
    signal:           SignalDirection | str,
    rsi:              float,
    mentions:         Optional[int] = 0,
    mention_velocity: MentionVelocity | str | None = MentionVelocity.STEADY,
    config:           Optional[AppConfig] = None,
    rules:            Optional[Sequence[ConfidenceRule]] = None,
) -> Recommendation:
    """Build a recommendation for one ticker.

    Args:
        hybrid_score:     Fused 0–100 score from ``calculate_hybrid_score()``.
        technical_rating: Technical rating (0–100).
        sentiment_rating: Sentiment rating (0–100).
        signal:           Directional label (bullish / bearish / neutral).
        rsi:              Relative Strength Index.
        mentions:         Mention count; ``None`` is treated as 0.
        mention_velocity: rising / falling / steady; ``None`` is treated as steady.
        config:           Engine config (defaults to ``AppConfig()``).
        rules:            Override the rule pipeline (defaults to ``default_rules``).

    Returns:
        ``Recommendation`` with clamped confidence and reasons in rule order.

    Raises:
        ValueError: If ``signal`` or ``mention_velocity`` is not a known label.
    """
    config = config or DEFAULT_CONFIG
    if rules is None:
        rules = default_rules(config.confidence)

    ctx = SignalContext(
        technical_rating=technical_rating,
        sentiment_rating=sentiment_rating,
        signal=SignalDirection(signal),
        rsi=rsi,
        mentions=mentions or 0,
        mention_velocity=MentionVelocity(mention_velocity or MentionVelocity.STEADY),
    )

    confidence = config.confidence.baseline
    reasons: list[str] = []
    for rule in rules:
        outcome = rule.evaluate(ctx)
        confidence += outcome.delta
        reasons.extend(outcome.reasons)
        if outcome.delta or outcome.reasons:
            logger.debug(
                "Rule %s fired: delta=%+d", rule.rule_name, outcome.delta,
                extra={"rule": rule.rule_name, "delta": outcome.delta},
            )

    action = classify_action(hybrid_score, config.thresholds)

    return Recommendation(
        action=action,
        confidence=int(clamp(confidence, 0, 100)),
        reasons=tuple(reasons),
    )
