"""
Derived signal models produced by the scoring engine.

``HybridScore``         — fused 0–100 score plus the weights that produced it.
``Recommendation``      — action, clamped confidence, ordered reasons.
``SignalDistribution``  — per-action ticker counts for a portfolio.
``MarketMoodSnapshot``  — portfolio regime, fear/greed tilt and insight text.
``PortfolioSnapshot``   — distribution + mood for a dashboard summary bar.

All models are frozen: they are recomputed on every refresh and never
mutated or persisted.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from signal_engine.taxonomy.signal_taxonomy import MarketMood, RecommendationAction


class HybridWeights(BaseModel):
    """Fusion ratio used for a hybrid score (expected to sum to 1.0)."""

    model_config = ConfigDict(frozen=True)

    technical: float
    sentiment: float


class HybridScore(BaseModel):
    """Weighted fusion of technical and sentiment ratings.

    Attributes:
        score:   Integer in [0, 100].
        weights: The weights applied, for display of the fusion ratio.
    """

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    weights: HybridWeights


class Recommendation(BaseModel):
    """Actionable recommendation for one ticker.

    ``reasons`` is ordered by the rule that produced each entry; the first
    entry doubles as the ticker's one-line tagline.
    """

    model_config = ConfigDict(frozen=True)

    action: RecommendationAction
    confidence: int = Field(ge=0, le=100)
    reasons: tuple[str, ...] = ()

    @property
    def tagline(self) -> str | None:
        return self.reasons[0] if self.reasons else None


class SignalDistribution(BaseModel):
    """Count of tickers in each recommendation bucket."""

    model_config = ConfigDict(frozen=True)

    strong_buy: int = 0
    buy: int = 0
    hold: int = 0
    sell: int = 0
    strong_sell: int = 0
    total: int = 0

    @model_validator(mode="after")
    def validate_total(self) -> "SignalDistribution":
        bucket_sum = self.strong_buy + self.buy + self.hold + self.sell + self.strong_sell
        if bucket_sum != self.total:
            raise ValueError(
                f"Bucket counts ({bucket_sum}) must sum to total ({self.total})."
            )
        return self

    def count(self, action: RecommendationAction) -> int:
        """Number of tickers bucketed as ``action``."""
        return getattr(self, action.value)

    def counts(self) -> dict[RecommendationAction, int]:
        """Mapping of every action to its count, most bullish first."""
        return {action: self.count(action) for action in RecommendationAction}


class MarketMoodSnapshot(BaseModel):
    """Aggregate mood of the visible ticker set.

    Attributes:
        mood:             Qualitative regime.
        sentiment:        Average sentiment mapped onto -1..1 (2 dp).
        hype_velocity:    Average scaled mention velocity, -100..100 (2 dp).
        fear_greed_tilt:  0 (fear) .. 100 (greed).
        vix_level:        Volatility index value used (1 dp).
        bullish_percentage: Share of bullish tickers, 0..100.
        insight:          One-sentence description of the regime.
    """

    model_config = ConfigDict(frozen=True)

    mood: MarketMood
    sentiment: float
    hype_velocity: float
    fear_greed_tilt: int = Field(ge=0, le=100)
    vix_level: float
    bullish_percentage: float = 0.0
    insight: str


class PortfolioSnapshot(BaseModel):
    """Dashboard summary for a set of enriched tickers."""

    model_config = ConfigDict(frozen=True)

    distribution: SignalDistribution
    mood: MarketMoodSnapshot
    generated_at: datetime
