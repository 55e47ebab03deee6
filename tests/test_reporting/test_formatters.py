"""
Tests for reporting/formatters.py.

Covers:
  - format_summary_bar: mood label, describer text, distribution counts
  - format_ticker_table: ordering by hybrid score, freshness tags, empty case
  - format_recommendation: fusion line and every reason
"""

from __future__ import annotations

from signal_engine.pipeline.enrich import build_portfolio_snapshot, enrich_ticker, enrich_tickers
from signal_engine.reporting.formatters import (
    format_freshness_tag,
    format_recommendation,
    format_summary_bar,
    format_ticker_table,
)
from signal_engine.taxonomy.signal_taxonomy import FreshnessTier


class TestFormatSummaryBar:
    def test_contains_mood_and_counts(self, sample_metrics):
        snapshot = build_portfolio_snapshot(enrich_tickers(sample_metrics), vix_level=18.5)
        text = format_summary_bar(snapshot)
        assert "=== Market Snapshot ===" in text
        assert "Mood:        NEUTRAL" in text
        assert "VIX: 18.5 (Normal)" in text
        assert "Strong Buy  Buy  Hold  Sell  Strong Sell  Total" in text
        last = text.splitlines()[-1].split()
        assert last == ["1", "1", "2", "0", "0", "4"]

    def test_empty_portfolio(self):
        text = format_summary_bar(build_portfolio_snapshot([]))
        assert "No tickers in view" in text


class TestFormatTickerTable:
    def test_sorted_by_hybrid_score(self, sample_metrics, reference_ms):
        enriched = [enrich_ticker(m, reference_ms=reference_ms) for m in sample_metrics]
        rows = format_ticker_table(enriched).splitlines()[4:]
        assert [r.split()[0] for r in rows] == ["AMD", "NVDA", "TSLA", "INTC"]

    def test_freshness_tags(self, sample_metrics, reference_ms):
        enriched = [enrich_ticker(m, reference_ms=reference_ms) for m in sample_metrics]
        text = format_ticker_table(enriched)
        assert "[NEW]" in text
        assert "[?]" in text

    def test_empty(self):
        assert "(no tickers to display)" in format_ticker_table([])


class TestFormatRecommendation:
    def test_lists_every_reason(self, sample_metrics):
        amd = enrich_ticker(sample_metrics[1])
        text = format_recommendation(amd)
        assert "=== AMD ===" in text
        assert "Hybrid score: 90" in text
        assert "Strong Buy" in text
        for reason in amd.recommendation.reasons:
            assert f"- {reason}" in text


def test_freshness_tag():
    assert format_freshness_tag(FreshnessTier.STALE) == "[STALE]"
    assert format_freshness_tag(None) == "[?]"
