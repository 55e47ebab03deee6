"""
Market mood estimation for the visible ticker set.

Inputs
------
avg_sentiment_rating : mean sentiment rating, 0–100
bullish_count        : tickers whose signal is "bullish"
total_stocks         : tickers in view
avg_mention_velocity : mean scaled mention velocity, -100..100
vix_level            : externally supplied volatility index

Derived values
--------------
    sentiment          = (avg_sentiment_rating - 50) / 50          # -1..1
    bullish_percentage = bullish_count / total_stocks * 100
    fear_greed_tilt    = round((1 - min(vix, 50) / 50) * 50
                               + (sentiment + 1) * 25)            # 0..100

Mood classification (first match wins)
--------------------------------------
    1. sentiment >  0.3 and bullish% > 60  → bullish
    2. sentiment >  0.1 and bullish% > 50  → cautious_bullish
    3. sentiment < -0.3 and bullish% < 40  → bearish
    4. sentiment < -0.1 and bullish% < 50  → cautious_bearish
    5. otherwise                           → neutral

An empty portfolio (``total_stocks <= 0``) returns a neutral snapshot with a
balanced 50 tilt instead of dividing by zero.
"""

from __future__ import annotations

import logging
from typing import Optional

from signal_engine.config import DEFAULT_CONFIG, MoodConfig
from signal_engine.models.signals import MarketMoodSnapshot
from signal_engine.taxonomy.signal_taxonomy import MarketMood
from signal_engine.utils.numeric import clamp, round_half_up

logger = logging.getLogger(__name__)

EMPTY_PORTFOLIO_INSIGHT = "No tickers in view. Add stocks to gauge market mood."


def calculate_market_mood(
    avg_sentiment_rating: float,
    bullish_count:        int,
    total_stocks:         int,
    avg_mention_velocity: float,
    vix_level:            float,
    config:               Optional[MoodConfig] = None,
) -> MarketMoodSnapshot:
    """Aggregate portfolio statistics into a ``MarketMoodSnapshot``.

    Args:
        avg_sentiment_rating: Mean sentiment rating (0–100).
        bullish_count:        Number of bullish tickers.
        total_stocks:         Number of tickers; ``<= 0`` short-circuits.
        avg_mention_velocity: Mean scaled mention velocity (-100..100).
        vix_level:            Volatility index value.
        config:               Mood thresholds; defaults to ``MoodConfig()``.

    Returns:
        MarketMoodSnapshot. Same inputs always give the same snapshot.
    """
    cfg = config or DEFAULT_CONFIG.mood

    if total_stocks <= 0:
        logger.warning("Market mood requested for an empty portfolio; returning neutral.")
        return MarketMoodSnapshot(
            mood=MarketMood.NEUTRAL,
            sentiment=0.0,
            hype_velocity=0.0,
            fear_greed_tilt=50,
            vix_level=round(vix_level, 1),
            bullish_percentage=0.0,
            insight=EMPTY_PORTFOLIO_INSIGHT,
        )

    sentiment = (avg_sentiment_rating - 50.0) / 50.0
    bullish_percentage = bullish_count / total_stocks * 100.0
    hype_velocity = avg_mention_velocity

    calm = 1.0 - min(vix_level, cfg.vix_cap) / cfg.vix_cap
    fear_greed_tilt = round_half_up(clamp(calm * 50.0 + (sentiment + 1.0) * 25.0, 0.0, 100.0))

    mood = _classify_mood(sentiment, bullish_percentage, cfg)
    insight = _build_insight(mood, bullish_percentage, hype_velocity)

    logger.debug(
        "Market mood %s: sentiment=%.2f bullish=%.0f%% tilt=%d",
        mood, sentiment, bullish_percentage, fear_greed_tilt,
    )

    return MarketMoodSnapshot(
        mood=mood,
        sentiment=round(sentiment, 2),
        hype_velocity=round(hype_velocity, 2),
        fear_greed_tilt=fear_greed_tilt,
        vix_level=round(vix_level, 1),
        bullish_percentage=round(bullish_percentage, 2),
        insight=insight,
    )


def _classify_mood(
    sentiment: float,
    bullish_percentage: float,
    cfg: MoodConfig,
) -> MarketMood:
    """Apply the mood rules in priority order; first match wins."""
    if sentiment > cfg.bullish_sentiment and bullish_percentage > cfg.bullish_pct:
        return MarketMood.BULLISH
    if sentiment > cfg.cautious_bullish_sentiment and bullish_percentage > cfg.cautious_bullish_pct:
        return MarketMood.CAUTIOUS_BULLISH
    if sentiment < cfg.bearish_sentiment and bullish_percentage < cfg.bearish_pct:
        return MarketMood.BEARISH
    if sentiment < cfg.cautious_bearish_sentiment and bullish_percentage < cfg.cautious_bearish_pct:
        return MarketMood.CAUTIOUS_BEARISH
    return MarketMood.NEUTRAL


def _build_insight(mood: MarketMood, bullish_percentage: float, hype_velocity: float) -> str:
    pct = f"{round_half_up(bullish_percentage)}%"
    if mood == MarketMood.BULLISH:
        momentum = " with accelerating momentum" if hype_velocity > 0 else ""
        return (
            f"Market showing strong bullish signals ({pct} bullish). "
            f"Sentiment rising{momentum}."
        )
    if mood == MarketMood.CAUTIOUS_BULLISH:
        return (
            "Market cautiously optimistic. Technical setup favorable, "
            "but sentiment not yet fully convinced."
        )
    if mood == MarketMood.CAUTIOUS_BEARISH:
        return (
            "Caution warranted. More stocks bearish than bullish, "
            "with concerning sentiment backdrop."
        )
    if mood == MarketMood.BEARISH:
        return (
            f"Market showing bearish conviction. {pct} bullish signals "
            "suggest continued weakness."
        )
    return (
        "Market at crossroads. Mixed signals between technical indicators "
        "and sentiment analysis."
    )


# ── Display helpers ───────────────────────────────────────────────────────────


def describe_vix(vix_level: float) -> str:
    """Volatility band label for a VIX reading."""
    if vix_level < 12:
        return "Very Calm"
    if vix_level < 16:
        return "Calm"
    if vix_level < 20:
        return "Normal"
    if vix_level < 30:
        return "Elevated"
    return "High Volatility"


def describe_fear_greed(fear_greed_tilt: int) -> str:
    """"Fear Dominant" below 50, "Greed Dominant" above, "Balanced" at 50."""
    if fear_greed_tilt < 50:
        return "Fear Dominant"
    if fear_greed_tilt > 50:
        return "Greed Dominant"
    return "Balanced"


def describe_hype_velocity(hype_velocity: float) -> str:
    """Trend label for the portfolio's scaled mention velocity."""
    if hype_velocity > 20:
        return "Hype accelerating - momentum picking up"
    if hype_velocity > 0:
        return "Steady interest increase"
    if hype_velocity > -20:
        return "Interest cooling down"
    return "Hype velocity falling sharply"
