"""
Shared pytest fixtures for the Hybrid Signal Engine test suite.

Provides:
  - ``reference_ms``: a pinned "now" in epoch ms so freshness is deterministic.
  - ``sample_metrics``: four backend-scored tickers covering buy, strong_buy
    and two hold cases (one aligned, one diverged).
  - ``quiet_config_file``: a TOML config with WARNING-level logging, for CLI
    tests whose stdout must stay pure JSON.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from signal_engine.config import AppConfig
from signal_engine.models.ticker import TickerMetrics

HOUR_MS = 3_600_000

# 2026-01-15T12:00:00Z
REFERENCE_MS = 1_768_478_400_000


@pytest.fixture
def reference_ms() -> int:
    return REFERENCE_MS


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def sample_payloads() -> list[dict]:
    """Raw flat payloads as delivered by the analysis backend."""
    return [
        {
            "ticker": "NVDA",
            "technical_rating": 72,
            "sentiment_rating": 85,
            "rsi": 64.0,
            "mentions": 1840,
            "mention_velocity": "rising",
            "signal": "bullish",
            "signal_timestamp_ms": REFERENCE_MS - 1 * HOUR_MS,
        },
        {
            "ticker": "AMD",
            "technical_rating": 88,
            "sentiment_rating": 92,
            "rsi": 74.0,
            "mentions": 950,
            "mention_velocity": "rising",
            "signal": "bullish",
            "signal_timestamp_ms": REFERENCE_MS - 3 * HOUR_MS,
        },
        {
            "ticker": "INTC",
            "technical_rating": 45,
            "sentiment_rating": 38,
            "rsi": 42.0,
            "mentions": 300,
            "mention_velocity": "falling",
            "signal": "bearish",
            "signal_timestamp_ms": REFERENCE_MS - 8 * HOUR_MS,
        },
        {
            "ticker": "TSLA",
            "technical_rating": 20,
            "sentiment_rating": 70,
            "rsi": 28.0,
            "mentions": 5000,
            "mention_velocity": "steady",
            "signal": "neutral",
        },
    ]


@pytest.fixture
def sample_metrics(sample_payloads: list[dict]) -> list[TickerMetrics]:
    return [TickerMetrics(**p) for p in sample_payloads]


@pytest.fixture
def quiet_config_file(tmp_path: Path) -> Path:
    path = tmp_path / "quiet.toml"
    path.write_text('[logging]\nlevel = "WARNING"\n', encoding="utf-8")
    return path
