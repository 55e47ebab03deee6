"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``SIGNAL_ENGINE_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``. ``SIGNAL_ENGINE_CONFIG``
names an alternative TOML file when no path is passed.

Every fusion weight, bucket threshold and confidence adjustment is a policy
value held here, so it can be tuned (or A/B tested) from TOML without
touching the scoring code. Library functions accept an optional config and
fall back to ``AppConfig()`` defaults, which match ``config/default.toml``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from signal_engine.taxonomy.signal_taxonomy import RecommendationAction

# ── Sub-config models ─────────────────────────────────────────────────────────


class HybridConfig(BaseModel):
    """Fusion weights for technical and sentiment ratings.

    The weights are expected to sum to 1.0 but this is not enforced; callers
    experimenting with other ratios get exactly the arithmetic they asked for.
    """

    model_config = ConfigDict(frozen=True)

    technical_weight: float = 0.45
    sentiment_weight: float = 0.55

    @field_validator("technical_weight", "sentiment_weight")
    @classmethod
    def validate_weight(cls, v: float) -> float:
        if v < 0.0:
            raise ValueError(f"Fusion weights must be non-negative, got {v}.")
        return v


class ActionThresholds(BaseModel):
    """Lower bounds of each action bucket on the 0–100 hybrid score.

    This is the single threshold table shared by the recommendation
    generator and the signal distribution aggregator.
    """

    model_config = ConfigDict(frozen=True)

    strong_buy: int = 80
    buy: int = 65
    hold: int = 40
    sell: int = 25

    @model_validator(mode="after")
    def validate_descending(self) -> "ActionThresholds":
        if not self.strong_buy > self.buy > self.hold > self.sell:
            raise ValueError(
                "Action thresholds must be strictly descending "
                f"(strong_buy > buy > hold > sell), got "
                f"{self.strong_buy}/{self.buy}/{self.hold}/{self.sell}."
            )
        return self

    def buckets(self) -> list[tuple[int, RecommendationAction]]:
        """Return ``(lower_bound, action)`` pairs from most to least bullish."""
        return [
            (self.strong_buy, RecommendationAction.STRONG_BUY),
            (self.buy,        RecommendationAction.BUY),
            (self.hold,       RecommendationAction.HOLD),
            (self.sell,       RecommendationAction.SELL),
        ]


class ConfidenceConfig(BaseModel):
    """Baseline and per-rule adjustments for recommendation confidence."""

    model_config = ConfigDict(frozen=True)

    baseline: int = 50

    # Alignment / divergence on |technical - sentiment|
    aligned_max_diff: float = 20.0      # diff < this → aligned
    aligned_bonus: int = 15
    diverged_min_diff: float = 40.0     # diff > this → diverged
    divergence_penalty: int = 8

    # RSI extremes
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0
    overbought_sentiment_confirm: float = 75.0   # sentiment > this confirms momentum
    oversold_sentiment_confirm: float = 40.0     # sentiment < this confirms capitulation
    rsi_confirm_bonus: int = 10
    rsi_unconfirmed_penalty: int = 5

    # Mention velocity
    rising_bonus: int = 8
    falling_penalty: int = 5

    @model_validator(mode="after")
    def validate_bands(self) -> "ConfidenceConfig":
        if self.aligned_max_diff > self.diverged_min_diff:
            raise ValueError(
                f"aligned_max_diff ({self.aligned_max_diff}) must not exceed "
                f"diverged_min_diff ({self.diverged_min_diff})."
            )
        if self.rsi_oversold >= self.rsi_overbought:
            raise ValueError(
                f"rsi_oversold ({self.rsi_oversold}) must be below "
                f"rsi_overbought ({self.rsi_overbought})."
            )
        return self


class MoodConfig(BaseModel):
    """Market mood classification thresholds.

    Sentiment thresholds are on the -1..1 scale; percentage thresholds are
    the share of bullish tickers (0–100).
    """

    model_config = ConfigDict(frozen=True)

    bullish_sentiment: float = 0.3
    bullish_pct: float = 60.0
    cautious_bullish_sentiment: float = 0.1
    cautious_bullish_pct: float = 50.0
    bearish_sentiment: float = -0.3
    bearish_pct: float = 40.0
    cautious_bearish_sentiment: float = -0.1
    cautious_bearish_pct: float = 50.0
    vix_cap: float = 50.0               # VIX above this counts as maximal fear
    default_vix_level: float = 20.0     # used when the caller supplies no VIX

    @field_validator("vix_cap")
    @classmethod
    def validate_vix_cap(cls, v: float) -> float:
        if v <= 0.0:
            raise ValueError(f"vix_cap must be positive, got {v}.")
        return v


class FreshnessConfig(BaseModel):
    """Upper bounds (hours, exclusive) of the new / fresh / recent tiers."""

    model_config = ConfigDict(frozen=True)

    new_hours: float = 2.0
    fresh_hours: float = 6.0
    recent_hours: float = 24.0

    @model_validator(mode="after")
    def validate_ascending(self) -> "FreshnessConfig":
        if not 0.0 < self.new_hours < self.fresh_hours < self.recent_hours:
            raise ValueError(
                "Freshness bands must be positive and strictly ascending, got "
                f"{self.new_hours}/{self.fresh_hours}/{self.recent_hours}."
            )
        return self


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False
    trace_rules: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete engine configuration — the single source of policy values.

    Constructed by ``load_config()`` which merges TOML + .env + env vars.
    ``AppConfig()`` with no arguments yields the built-in defaults.
    """

    model_config = ConfigDict(frozen=True)

    hybrid: HybridConfig = HybridConfig()
    thresholds: ActionThresholds = ActionThresholds()
    confidence: ConfidenceConfig = ConfidenceConfig()
    mood: MoodConfig = MoodConfig()
    freshness: FreshnessConfig = FreshnessConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


DEFAULT_CONFIG = AppConfig()


# ── Loader ────────────────────────────────────────────────────────────────────


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# Env var suffix → (section or None for top level, key, parser).
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str, Callable[[str], Any]]] = {
    "LOG_LEVEL":        ("logging", "level", str),
    "LOG_FILE":         ("logging", "log_file", str),
    "LOG_JSON":         ("logging", "json_format", _parse_bool),
    "TRACE_RULES":      ("logging", "trace_rules", _parse_bool),
    "TECHNICAL_WEIGHT": ("hybrid", "technical_weight", float),
    "SENTIMENT_WEIGHT": ("hybrid", "sentiment_weight", float),
    "DEFAULT_VIX":      ("mood", "default_vix_level", float),
    "DEBUG":            (None, "debug", _parse_bool),
}

ENV_PREFIX = "SIGNAL_ENGINE_"


def _find_project_root() -> Path:
    """Nearest ancestor of this package that holds ``pyproject.toml``."""
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate
    return here.parent


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge engine configuration.

    Args:
        config_path: Explicit path to a TOML config file. Falls back to
            ``$SIGNAL_ENGINE_CONFIG``, then ``<project_root>/config/default.toml``.
            A ``local.toml`` beside the chosen file is merged on top.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the resolved config file does not exist.
        ValueError: If a ``SIGNAL_ENGINE_*`` variable cannot be parsed.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()
    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        config_path = Path(env_path) if env_path else root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config explicitly."
        )

    raw = _read_toml(config_path)
    local_path = config_path.parent / "local.toml"
    if local_path.exists() and local_path != config_path:
        raw = _deep_merge(raw, _read_toml(local_path))

    raw = _apply_env_overrides(raw, os.environ)
    return AppConfig.model_validate(raw)


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = dict(base)
    for key, val in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(val, dict):
            merged[key] = _deep_merge(current, val)
        else:
            merged[key] = val
    return merged


def _apply_env_overrides(raw: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    """Return ``raw`` with every set ``SIGNAL_ENGINE_*`` override applied.

    Empty variables are ignored. See ``_ENV_OVERRIDES`` for the supported
    names.
    """
    overrides: dict[str, Any] = {}
    for suffix, (section, key, parse) in _ENV_OVERRIDES.items():
        name = ENV_PREFIX + suffix
        value = environ.get(name)
        if not value:
            continue
        try:
            parsed = parse(value)
        except ValueError as exc:
            raise ValueError(f"{name}={value!r} is not a valid value: {exc}") from exc
        if section is None:
            overrides[key] = parsed
        else:
            overrides.setdefault(section, {})[key] = parsed
    return _deep_merge(raw, overrides)
