"""
Tests for signal_engine/scoring/hybrid.py.

What we test
------------
calculate_hybrid_score():
  - Known fusions with the default 0.45 / 0.55 weights.
  - Output stays in [0, 100] for out-of-range and infinite inputs.
  - .5 rounds up, not to even.
  - The weights used are returned.

classify_action():
  - Every bucket boundary, on both sides (no off-by-one).
  - Custom threshold tables.
"""

from __future__ import annotations

import math

import pytest

from signal_engine.config import ActionThresholds
from signal_engine.scoring.hybrid import calculate_hybrid_score, classify_action
from signal_engine.taxonomy.signal_taxonomy import RecommendationAction


class TestCalculateHybridScore:
    @pytest.mark.parametrize(
        "technical, sentiment, expected",
        [
            (72, 85, 79),   # 32.4 + 46.75 = 79.15
            (88, 92, 90),   # 39.6 + 50.6  = 90.2
            (45, 38, 41),   # 20.25 + 20.9 = 41.15
            (0, 0, 0),
            (100, 100, 100),
        ],
    )
    def test_default_weights(self, technical, sentiment, expected):
        assert calculate_hybrid_score(technical, sentiment).score == expected

    def test_returns_default_weights(self):
        result = calculate_hybrid_score(50, 50)
        assert result.weights.technical == pytest.approx(0.45)
        assert result.weights.sentiment == pytest.approx(0.55)

    def test_custom_weights_are_applied_and_returned(self):
        result = calculate_hybrid_score(80, 20, technical_weight=0.75, sentiment_weight=0.25)
        assert result.score == 65
        assert result.weights.technical == pytest.approx(0.75)
        assert result.weights.sentiment == pytest.approx(0.25)

    def test_half_rounds_up(self):
        # 2.5 + 2.0 = 4.5 -> 5 (banker's rounding would give 4)
        assert calculate_hybrid_score(5, 4, 0.5, 0.5).score == 5

    @pytest.mark.parametrize(
        "technical, sentiment",
        [(150, 180), (-40, -90), (1e9, 0), (-1e9, 50), (math.inf, 10), (-math.inf, 10)],
    )
    def test_out_of_range_inputs_are_clamped(self, technical, sentiment):
        score = calculate_hybrid_score(technical, sentiment).score
        assert 0 <= score <= 100

    def test_large_inputs_clamp_to_100(self):
        assert calculate_hybrid_score(500, 500).score == 100

    def test_negative_inputs_clamp_to_0(self):
        assert calculate_hybrid_score(-10, -10).score == 0


class TestClassifyAction:
    @pytest.mark.parametrize(
        "score, expected",
        [
            (100, RecommendationAction.STRONG_BUY),
            (80, RecommendationAction.STRONG_BUY),
            (79, RecommendationAction.BUY),
            (65, RecommendationAction.BUY),
            (64, RecommendationAction.HOLD),
            (40, RecommendationAction.HOLD),
            (39, RecommendationAction.SELL),
            (25, RecommendationAction.SELL),
            (24, RecommendationAction.STRONG_SELL),
            (0, RecommendationAction.STRONG_SELL),
        ],
    )
    def test_default_buckets(self, score, expected):
        assert classify_action(score) == expected

    def test_reference_scores_bucket(self):
        assert classify_action(calculate_hybrid_score(72, 85).score) == RecommendationAction.BUY
        assert classify_action(calculate_hybrid_score(88, 92).score) == RecommendationAction.STRONG_BUY
        assert classify_action(calculate_hybrid_score(45, 38).score) == RecommendationAction.HOLD

    def test_custom_thresholds(self):
        thresholds = ActionThresholds(strong_buy=90, buy=70, hold=50, sell=30)
        assert classify_action(85, thresholds) == RecommendationAction.BUY
        assert classify_action(90, thresholds) == RecommendationAction.STRONG_BUY
        assert classify_action(29, thresholds) == RecommendationAction.STRONG_SELL
