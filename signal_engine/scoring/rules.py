"""
Confidence rules for recommendation generation.

Each rule inspects a ``SignalContext`` and returns a ``RuleOutcome``: an
integer confidence delta plus zero or more reason strings. Rules know
nothing about each other; ``generate_recommendation()`` applies them in
list order, so the order of ``default_rules()`` IS the order of the
``reasons`` list (the first reason is the ticker's tagline).

Default pipeline
----------------
    1. AlignmentRule        diff < 20  → +15, "Strong alignment ..."
    2. RsiExtremeRule       rsi > 70 / rsi < 30, ±10 / −5 depending on
                            whether sentiment confirms the extreme
    3. MentionVelocityRule  rising +8, falling −5, steady nothing
    4. DivergenceRule       diff > 40  → −8, "... mixed signals"

``diff`` is ``|technical_rating - sentiment_rating|``. The 20..40 band is
an ambiguous zone where neither alignment nor divergence applies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from signal_engine.config import ConfidenceConfig
from signal_engine.taxonomy.signal_taxonomy import MentionVelocity, SignalDirection


@dataclass(frozen=True)
class SignalContext:
    """Supporting inputs for one recommendation."""

    technical_rating: float
    sentiment_rating: float
    signal: SignalDirection
    rsi: float
    mentions: int = 0
    mention_velocity: MentionVelocity = MentionVelocity.STEADY

    @property
    def rating_gap(self) -> float:
        return abs(self.technical_rating - self.sentiment_rating)


@dataclass(frozen=True)
class RuleOutcome:
    """Contribution of one rule: confidence delta and reasons, in order."""

    delta: int = 0
    reasons: tuple[str, ...] = ()


NO_CHANGE = RuleOutcome()


class ConfidenceRule(ABC):
    """Base class for a single confidence heuristic.

    Subclasses set ``rule_name`` and implement ``evaluate()``.
    """

    rule_name: ClassVar[str]

    def __init__(self, config: ConfidenceConfig) -> None:
        self.config = config

    @abstractmethod
    def evaluate(self, ctx: SignalContext) -> RuleOutcome:
        """Return this rule's outcome for ``ctx`` (``NO_CHANGE`` if it does not fire)."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rule_name}>"


class AlignmentRule(ConfidenceRule):
    """Technical and sentiment agree → more confidence."""

    rule_name = "alignment"

    _REASONS: ClassVar[dict[SignalDirection, str]] = {
        SignalDirection.BULLISH: "Strong alignment: Technical AND sentiment both bullish",
        SignalDirection.BEARISH: "Strong alignment: Technical AND sentiment both bearish",
        SignalDirection.NEUTRAL: "Strong alignment: Both metrics neutral",
    }

    def evaluate(self, ctx: SignalContext) -> RuleOutcome:
        if ctx.rating_gap >= self.config.aligned_max_diff:
            return NO_CHANGE
        reason = self._REASONS.get(ctx.signal, self._REASONS[SignalDirection.NEUTRAL])
        return RuleOutcome(delta=self.config.aligned_bonus, reasons=(reason,))


class RsiExtremeRule(ConfidenceRule):
    """Overbought / oversold RSI, weighted by whether sentiment agrees."""

    rule_name = "rsi_extreme"

    def evaluate(self, ctx: SignalContext) -> RuleOutcome:
        cfg = self.config

        if ctx.rsi > cfg.rsi_overbought:
            reasons = ["RSI overbought - potential pullback risk"]
            if ctx.sentiment_rating > cfg.overbought_sentiment_confirm:
                reasons.append("...but sentiment strongly positive - momentum may continue")
                return RuleOutcome(delta=cfg.rsi_confirm_bonus, reasons=tuple(reasons))
            return RuleOutcome(delta=-cfg.rsi_unconfirmed_penalty, reasons=tuple(reasons))

        if ctx.rsi < cfg.rsi_oversold:
            reasons = ["RSI oversold - potential bounce incoming"]
            if ctx.sentiment_rating < cfg.oversold_sentiment_confirm:
                reasons.append("...and sentiment negative - capitulation setting up")
                return RuleOutcome(delta=cfg.rsi_confirm_bonus, reasons=tuple(reasons))
            return RuleOutcome(delta=-cfg.rsi_unconfirmed_penalty, reasons=tuple(reasons))

        return NO_CHANGE


class MentionVelocityRule(ConfidenceRule):
    """Rising attention adds confidence; waning attention removes it."""

    rule_name = "mention_velocity"

    def evaluate(self, ctx: SignalContext) -> RuleOutcome:
        if ctx.mention_velocity == MentionVelocity.RISING:
            return RuleOutcome(
                delta=self.config.rising_bonus,
                reasons=("Hype velocity rising - attention increasing",),
            )
        if ctx.mention_velocity == MentionVelocity.FALLING:
            return RuleOutcome(
                delta=-self.config.falling_penalty,
                reasons=("Hype velocity falling - interest waning",),
            )
        return NO_CHANGE


class DivergenceRule(ConfidenceRule):
    """Technical and sentiment far apart → less confidence."""

    rule_name = "divergence"

    def evaluate(self, ctx: SignalContext) -> RuleOutcome:
        if ctx.rating_gap <= self.config.diverged_min_diff:
            return NO_CHANGE
        return RuleOutcome(
            delta=-self.config.divergence_penalty,
            reasons=("Technical/sentiment divergence - mixed signals",),
        )


def default_rules(config: ConfidenceConfig) -> list[ConfidenceRule]:
    """The standard rule pipeline, in reason order."""
    return [
        AlignmentRule(config),
        RsiExtremeRule(config),
        MentionVelocityRule(config),
        DivergenceRule(config),
    ]
