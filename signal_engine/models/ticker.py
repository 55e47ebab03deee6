"""
Per-ticker input and output models.

``TickerMetrics`` is the already-scored payload delivered by the external
analysis backend. It accepts the flat wire format::

    {"ticker": "NVDA", "technical_rating": 72, "sentiment_rating": 85,
     "rsi": 64.2, "mentions": 1840, "mention_velocity": "rising",
     "signal": "bullish"}

and the nested batch-analysis format (``from_backend_signal()``) where
RSI lives under ``technical_analysis`` and mention data under
``sentiment_analysis``. Malformed input of either shape surfaces as a
pydantic ``ValidationError``.

``EnrichedTicker`` is the input plus the engine's derived fields, ready for
the display layer.

Ratings are deliberately NOT range-checked here: producers clamp them, and
the engine clamps its own outputs instead of rejecting odd input.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from signal_engine.models.signals import HybridWeights, Recommendation
from signal_engine.taxonomy.signal_taxonomy import (
    FreshnessTier,
    MentionVelocity,
    SignalDirection,
)
from signal_engine.utils.numeric import round_half_up
from signal_engine.utils.time_utils import to_epoch_ms

DEFAULT_TAGLINE = "Market analysis available"

_NESTED_SECTIONS = {"technical_analysis", "sentiment_analysis", "metadata"}


class TickerMetrics(BaseModel):
    """Backend-scored metrics for one ticker.

    Attributes:
        ticker:              Symbol, upper-cased.
        technical_rating:    0–100 technical rating.
        sentiment_rating:    0–100 sentiment rating; derived from
                             ``sentiment_score`` when absent.
        sentiment_score:     Alternative -1..1 sentiment representation.
        rsi:                 Relative Strength Index (0–100).
        mentions:            Mention count; ``None`` → 0.
        mention_velocity:    rising / falling / steady; ``None`` → steady.
        signal:              Directional label from the backend.
        signal_timestamp_ms: Epoch ms when the signal was produced, if known.
        company_name:        Display name, if known.
    """

    model_config = ConfigDict(frozen=True)

    ticker: str
    technical_rating: float
    sentiment_rating: float
    sentiment_score: Optional[float] = None
    rsi: float = 50.0
    mentions: int = 0
    mention_velocity: MentionVelocity = MentionVelocity.STEADY
    signal: SignalDirection = SignalDirection.NEUTRAL
    signal_timestamp_ms: Optional[int] = None
    company_name: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalise_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if _NESTED_SECTIONS & data.keys():
            data = _flatten_backend_signal(data)
        if data.get("sentiment_rating") is not None:
            return data
        score = data.get("sentiment_score")
        if score is None:
            raise ValueError(
                "Either sentiment_rating or sentiment_score must be provided."
            )
        return {**data, "sentiment_rating": round_half_up((float(score) + 1.0) * 50.0)}

    @field_validator("ticker")
    @classmethod
    def normalise_ticker(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("ticker must not be empty.")
        return v

    @field_validator("signal_timestamp_ms", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> Any:
        """Accept epoch ms, a datetime, or an ISO-8601 string."""
        if isinstance(v, datetime):
            return to_epoch_ms(v)
        if isinstance(v, str) and not v.strip().isdigit():
            ts = datetime.fromisoformat(v.strip().replace("Z", "+00:00"))
            return to_epoch_ms(ts)
        return v

    @field_validator("mentions", mode="before")
    @classmethod
    def default_mentions(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("mention_velocity", mode="before")
    @classmethod
    def default_velocity(cls, v: Any) -> Any:
        return MentionVelocity.STEADY if v is None else v

    @field_validator("signal", mode="before")
    @classmethod
    def default_signal(cls, v: Any) -> Any:
        return SignalDirection.NEUTRAL if v is None else v

    @classmethod
    def from_backend_signal(cls, payload: Any) -> "TickerMetrics":
        """Build from a nested batch-analysis signal.

        Flat keys win over nested ones. ``metadata.analyzed_at`` (ISO-8601)
        becomes ``signal_timestamp_ms`` when no explicit timestamp is given.

        Raises:
            pydantic.ValidationError: On any malformed section or value.
        """
        return cls.model_validate(payload)


def _section(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be an object, got {type(value).__name__}.")
    return value


def _flatten_backend_signal(payload: dict[str, Any]) -> dict[str, Any]:
    technical = _section(payload, "technical_analysis")
    sentiment = _section(payload, "sentiment_analysis")
    metadata = _section(payload, "metadata")

    flat: dict[str, Any] = {
        "rsi": technical.get("rsi"),
        "mentions": sentiment.get("mentions"),
        "mention_velocity": sentiment.get("mention_velocity"),
        "sentiment_score": sentiment.get("sentiment_score"),
        "signal_timestamp_ms": metadata.get("analyzed_at") or None,
    }
    flat.update((k, v) for k, v in payload.items() if v is not None)
    return {k: v for k, v in flat.items() if v is not None}


class EnrichedTicker(TickerMetrics):
    """Ticker metrics plus the engine's derived display fields."""

    hybrid_score: int
    hybrid_weights: HybridWeights
    recommendation: Recommendation
    tagline: str = DEFAULT_TAGLINE
    freshness: Optional[FreshnessTier] = None
