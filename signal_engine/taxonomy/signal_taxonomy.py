"""
Signal taxonomy for the hybrid scoring engine.

Five closed vocabularies describe every per-ticker and portfolio output:
  - ``RecommendationAction`` — what to do, ordered most bullish → most bearish.
  - ``SignalDirection``      — directional label supplied by the analysis backend.
  - ``MentionVelocity``      — trend of social/news mention volume.
  - ``MarketMood``           — portfolio-level regime.
  - ``FreshnessTier``        — qualitative age bucket of a signal.

All members are ``StrEnum`` so they serialise to their wire values directly.

This module has NO imports from any other ``signal_engine`` package.
"""

from enum import StrEnum


class RecommendationAction(StrEnum):
    """Trading action derived from the hybrid score."""

    STRONG_BUY = "strong_buy"
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"
    STRONG_SELL = "strong_sell"


class SignalDirection(StrEnum):
    """Directional label independent of the numeric score."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class MentionVelocity(StrEnum):
    """Direction of mention-volume change."""

    RISING = "rising"
    FALLING = "falling"
    STEADY = "steady"


class MarketMood(StrEnum):
    """Qualitative market regime for the visible ticker set."""

    BEARISH = "bearish"
    CAUTIOUS_BEARISH = "cautious_bearish"
    NEUTRAL = "neutral"
    CAUTIOUS_BULLISH = "cautious_bullish"
    BULLISH = "bullish"


class FreshnessTier(StrEnum):
    """Age bucket of a signal; decays new → fresh → recent → stale."""

    NEW = "new"
    FRESH = "fresh"
    RECENT = "recent"
    STALE = "stale"


# Scaled contribution of each velocity to the portfolio hype average (-100..100).
VELOCITY_SCALE: dict[MentionVelocity, float] = {
    MentionVelocity.RISING:  100.0,
    MentionVelocity.STEADY:    0.0,
    MentionVelocity.FALLING: -100.0,
}
