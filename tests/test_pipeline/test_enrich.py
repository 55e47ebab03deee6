"""
Tests for pipeline/enrich.py.

What we test
------------
enrich_ticker():
  - Hybrid score, action, confidence and tagline for the sample tickers.
  - Default tagline when no rule fires.
  - Freshness only when a timestamp is present.
  - Config weights flow through to the hybrid score.

parse_ticker_payloads():
  - Flat and nested backend formats in one batch.
  - Non-object items and malformed sections raise ValidationError.

build_portfolio_snapshot():
  - Distribution and mood for the sample portfolio.
  - Default VIX from config; explicit VIX override.
  - Empty portfolio resolves to a neutral snapshot.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from signal_engine.config import AppConfig, HybridConfig, MoodConfig
from signal_engine.models.ticker import DEFAULT_TAGLINE, TickerMetrics
from signal_engine.pipeline.enrich import (
    build_portfolio_snapshot,
    enrich_ticker,
    enrich_tickers,
    parse_ticker_payloads,
)
from signal_engine.taxonomy.signal_taxonomy import (
    FreshnessTier,
    MarketMood,
    RecommendationAction,
)


def _by_ticker(enriched):
    return {t.ticker: t for t in enriched}


class TestEnrichTicker:
    def test_sample_portfolio(self, sample_metrics, reference_ms):
        enriched = _by_ticker(enrich_ticker(m, reference_ms=reference_ms) for m in sample_metrics)

        nvda = enriched["NVDA"]
        assert nvda.hybrid_score == 79
        assert nvda.recommendation.action == RecommendationAction.BUY
        assert nvda.recommendation.confidence == 73
        assert nvda.tagline == "Strong alignment: Technical AND sentiment both bullish"
        assert nvda.freshness == FreshnessTier.NEW

        amd = enriched["AMD"]
        assert amd.hybrid_score == 90
        assert amd.recommendation.action == RecommendationAction.STRONG_BUY
        assert amd.recommendation.confidence == 83
        assert amd.freshness == FreshnessTier.FRESH

        intc = enriched["INTC"]
        assert intc.hybrid_score == 41
        assert intc.recommendation.action == RecommendationAction.HOLD
        assert intc.recommendation.confidence == 60
        assert intc.freshness == FreshnessTier.RECENT

        tsla = enriched["TSLA"]
        assert tsla.hybrid_score == 48
        assert tsla.recommendation.confidence == 37
        assert tsla.tagline == "RSI oversold - potential bounce incoming"
        assert tsla.freshness is None

    def test_input_fields_are_carried_through(self, sample_metrics):
        nvda = enrich_ticker(sample_metrics[0])
        assert nvda.ticker == "NVDA"
        assert nvda.mentions == 1840
        assert nvda.rsi == pytest.approx(64.0)
        assert nvda.hybrid_weights.technical == pytest.approx(0.45)

    def test_default_tagline_when_nothing_fires(self):
        metrics = TickerMetrics(ticker="F", technical_rating=70, sentiment_rating=40, rsi=50)
        enriched = enrich_ticker(metrics)
        assert enriched.recommendation.reasons == ()
        assert enriched.tagline == DEFAULT_TAGLINE

    def test_config_weights_are_used(self, sample_metrics):
        config = AppConfig(hybrid=HybridConfig(technical_weight=0.5, sentiment_weight=0.5))
        nvda = enrich_ticker(sample_metrics[0], config)
        assert nvda.hybrid_score == 79  # (72 + 85) / 2 = 78.5 -> 79
        assert nvda.hybrid_weights.sentiment == pytest.approx(0.5)

    def test_re_enriching_an_enriched_ticker(self, sample_metrics):
        once = enrich_ticker(sample_metrics[0])
        twice = enrich_ticker(once)
        assert twice.hybrid_score == once.hybrid_score
        assert twice.recommendation == once.recommendation

    def test_enrich_tickers_preserves_order(self, sample_metrics):
        enriched = enrich_tickers(sample_metrics)
        assert [t.ticker for t in enriched] == ["NVDA", "AMD", "INTC", "TSLA"]


class TestParseTickerPayloads:
    def test_flat_and_nested(self):
        payloads = [
            {"ticker": "nvda", "technical_rating": 72, "sentiment_rating": 85, "rsi": 64},
            {
                "ticker": "AAPL",
                "company_name": "Apple Inc.",
                "signal": "bullish",
                "technical_rating": 66,
                "sentiment_rating": 71,
                "technical_analysis": {"rsi": 58.2, "price": 231.4},
                "sentiment_analysis": {
                    "mentions": 420,
                    "mention_velocity": "rising",
                    "sentiment_score": 0.42,
                },
            },
        ]
        parsed = parse_ticker_payloads(payloads)
        assert parsed[0].ticker == "NVDA"
        assert parsed[1].rsi == pytest.approx(58.2)
        assert parsed[1].mentions == 420
        assert parsed[1].sentiment_rating == 71

    @pytest.mark.parametrize("item", [42, "NVDA", None, ["NVDA", 72, 85]])
    def test_non_object_item_raises_validation_error(self, item):
        with pytest.raises(ValidationError):
            parse_ticker_payloads([item])

    def test_malformed_nested_section_raises_validation_error(self):
        payload = {
            "ticker": "AAPL",
            "technical_rating": 66,
            "sentiment_rating": 71,
            "technical_analysis": 58.2,
        }
        with pytest.raises(ValidationError):
            parse_ticker_payloads([payload])


class TestBuildPortfolioSnapshot:
    def test_sample_portfolio(self, sample_metrics):
        snapshot = build_portfolio_snapshot(enrich_tickers(sample_metrics))

        dist = snapshot.distribution
        assert (dist.strong_buy, dist.buy, dist.hold, dist.sell, dist.strong_sell) == (1, 1, 2, 0, 0)
        assert dist.total == 4

        mood = snapshot.mood
        # avg sentiment 71.25 -> 0.425; 2/4 bullish = 50% (not > 50)
        assert mood.mood == MarketMood.NEUTRAL
        assert mood.sentiment == pytest.approx(0.425, abs=0.01)
        assert mood.bullish_percentage == pytest.approx(50.0)
        # rising, rising, falling, steady -> (100 + 100 - 100 + 0) / 4
        assert mood.hype_velocity == pytest.approx(25.0)
        assert mood.vix_level == pytest.approx(20.0)
        assert mood.fear_greed_tilt == 66

    def test_explicit_vix(self, sample_metrics):
        snapshot = build_portfolio_snapshot(enrich_tickers(sample_metrics), vix_level=35.0)
        assert snapshot.mood.vix_level == pytest.approx(35.0)
        assert snapshot.mood.fear_greed_tilt < 66

    def test_default_vix_from_config(self, sample_metrics):
        config = AppConfig(mood=MoodConfig(default_vix_level=12.5))
        snapshot = build_portfolio_snapshot(enrich_tickers(sample_metrics), config=config)
        assert snapshot.mood.vix_level == pytest.approx(12.5)

    def test_empty_portfolio(self):
        snapshot = build_portfolio_snapshot([])
        assert snapshot.distribution.total == 0
        assert snapshot.mood.mood == MarketMood.NEUTRAL
        assert snapshot.mood.fear_greed_tilt == 50

    def test_generated_at_is_utc(self, sample_metrics):
        snapshot = build_portfolio_snapshot(enrich_tickers(sample_metrics))
        assert snapshot.generated_at.tzinfo is not None
