"""
Enrichment pipeline: per-ticker metrics → enriched records → portfolio snapshot.

Usage flow
----------
1. enrich_tickers(metrics, config)
   -> list[EnrichedTicker]  (hybrid score + recommendation + freshness)

2. build_portfolio_snapshot(enriched, vix_level, config)
   -> PortfolioSnapshot  (signal distribution + market mood)

Both steps are pure transformations; callers decide when to re-run them
(each poll cycle, or when a ticker is added).
"""

from __future__ import annotations

import logging
from statistics import fmean
from typing import Any, Iterable, Optional

from signal_engine.config import DEFAULT_CONFIG, AppConfig
from signal_engine.models.signals import PortfolioSnapshot
from signal_engine.models.ticker import DEFAULT_TAGLINE, EnrichedTicker, TickerMetrics
from signal_engine.portfolio.distribution import calculate_signal_distribution
from signal_engine.portfolio.mood import calculate_market_mood
from signal_engine.scoring.freshness import get_signal_freshness
from signal_engine.scoring.hybrid import calculate_hybrid_score
from signal_engine.scoring.recommendation import generate_recommendation
from signal_engine.taxonomy.signal_taxonomy import VELOCITY_SCALE, SignalDirection
from signal_engine.utils.time_utils import now_ms, utcnow

logger = logging.getLogger(__name__)


def enrich_ticker(
    metrics: TickerMetrics,
    config: Optional[AppConfig] = None,
    reference_ms: Optional[float] = None,
) -> EnrichedTicker:
    """Score one ticker.

    Args:
        metrics:      Backend-scored ticker metrics.
        config:       Engine config (defaults to ``AppConfig()``).
        reference_ms: Clock for freshness (epoch ms); defaults to now.

    Returns:
        EnrichedTicker carrying the input fields plus derived fields.
    """
    config = config or DEFAULT_CONFIG

    hybrid = calculate_hybrid_score(
        metrics.technical_rating,
        metrics.sentiment_rating,
        technical_weight=config.hybrid.technical_weight,
        sentiment_weight=config.hybrid.sentiment_weight,
    )
    recommendation = generate_recommendation(
        hybrid_score=hybrid.score,
        technical_rating=metrics.technical_rating,
        sentiment_rating=metrics.sentiment_rating,
        signal=metrics.signal,
        rsi=metrics.rsi,
        mentions=metrics.mentions,
        mention_velocity=metrics.mention_velocity,
        config=config,
    )

    freshness = None
    if metrics.signal_timestamp_ms is not None:
        freshness = get_signal_freshness(
            metrics.signal_timestamp_ms, reference_ms, config.freshness
        )

    logger.debug(
        "%s: hybrid=%d action=%s confidence=%d",
        metrics.ticker, hybrid.score, recommendation.action, recommendation.confidence,
        extra={"ticker": metrics.ticker},
    )

    return EnrichedTicker(
        **metrics.model_dump(include=set(TickerMetrics.model_fields)),
        hybrid_score=hybrid.score,
        hybrid_weights=hybrid.weights,
        recommendation=recommendation,
        tagline=recommendation.tagline or DEFAULT_TAGLINE,
        freshness=freshness,
    )


def enrich_tickers(
    metrics: Iterable[TickerMetrics],
    config: Optional[AppConfig] = None,
) -> list[EnrichedTicker]:
    """Score every ticker against a single shared clock reading."""
    reference_ms = now_ms()
    enriched = [enrich_ticker(m, config, reference_ms) for m in metrics]
    logger.info("Enriched %d tickers", len(enriched), extra={"ticker_count": len(enriched)})
    return enriched


def parse_ticker_payloads(payloads: Iterable[Any]) -> list[TickerMetrics]:
    """Validate raw payloads, accepting both flat and nested backend formats.

    Raises:
        pydantic.ValidationError: If a payload is not an object or cannot be
            adapted.
    """
    return [TickerMetrics.model_validate(payload) for payload in payloads]


def build_portfolio_snapshot(
    enriched: list[EnrichedTicker],
    vix_level: Optional[float] = None,
    config: Optional[AppConfig] = None,
) -> PortfolioSnapshot:
    """Aggregate enriched tickers into a dashboard summary.

    Mention velocity is scaled rising=+100, steady=0, falling=-100 and
    averaged, giving the -100..100 hype velocity.

    Args:
        enriched:  Enriched tickers currently in view (may be empty).
        vix_level: Volatility index; defaults to ``MoodConfig.default_vix_level``.
        config:    Engine config (defaults to ``AppConfig()``).

    Returns:
        PortfolioSnapshot with distribution, mood and generation time.
    """
    config = config or DEFAULT_CONFIG
    if vix_level is None:
        vix_level = config.mood.default_vix_level

    if enriched:
        avg_sentiment = fmean(t.sentiment_rating for t in enriched)
        avg_velocity = fmean(VELOCITY_SCALE[t.mention_velocity] for t in enriched)
    else:
        avg_sentiment = 50.0
        avg_velocity = 0.0
    bullish_count = sum(1 for t in enriched if t.signal == SignalDirection.BULLISH)

    distribution = calculate_signal_distribution(enriched, config.thresholds)
    mood = calculate_market_mood(
        avg_sentiment_rating=avg_sentiment,
        bullish_count=bullish_count,
        total_stocks=len(enriched),
        avg_mention_velocity=avg_velocity,
        vix_level=vix_level,
        config=config.mood,
    )

    logger.info(
        "Portfolio snapshot: %d tickers, mood=%s, tilt=%d",
        distribution.total, mood.mood, mood.fear_greed_tilt,
    )
    return PortfolioSnapshot(distribution=distribution, mood=mood, generated_at=utcnow())
