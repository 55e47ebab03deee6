"""
ASCII terminal formatters for CLI output.

All formatters accept engine models and return plain multi-line strings
suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Freshness tags
--------------
Each ticker row carries a bracketed freshness tag so readers can tell at a
glance whether they are looking at a current signal::

  [NEW]     < 2h old
  [FRESH]   < 6h old
  [RECENT]  < 24h old
  [STALE]   older -- do not act on these without a refresh
  [?]       signal timestamp not available
"""

from __future__ import annotations

from signal_engine.models.signals import PortfolioSnapshot
from signal_engine.models.ticker import EnrichedTicker
from signal_engine.portfolio.mood import (
    describe_fear_greed,
    describe_hype_velocity,
    describe_vix,
)
from signal_engine.taxonomy.signal_taxonomy import FreshnessTier, RecommendationAction

_ACTION_LABELS: dict[RecommendationAction, str] = {
    RecommendationAction.STRONG_BUY:  "Strong Buy",
    RecommendationAction.BUY:         "Buy",
    RecommendationAction.HOLD:        "Hold",
    RecommendationAction.SELL:        "Sell",
    RecommendationAction.STRONG_SELL: "Strong Sell",
}


def format_action(action: RecommendationAction) -> str:
    return _ACTION_LABELS[action]


def format_freshness_tag(tier: FreshnessTier | None) -> str:
    if tier is None:
        return "[?]"
    return f"[{tier.value.upper()}]"


# ── Portfolio summary ─────────────────────────────────────────────────────────


def format_summary_bar(snapshot: PortfolioSnapshot) -> str:
    """Format the portfolio mood + signal distribution block.

    Example::

        === Market Snapshot ===
          Mood:        CAUTIOUS BULLISH
          Sentiment:   +0.24   Hype: +33.3% (Steady interest increase)
          Fear/Greed:  62 (Greed Dominant)   VIX: 18.5 (Normal)
          Market cautiously optimistic. ...

          Strong Buy  Buy  Hold  Sell  Strong Sell  Total
                   1    2     1     0            0      4
    """
    mood = snapshot.mood
    dist = snapshot.distribution

    lines: list[str] = []
    lines.append("")
    lines.append("=== Market Snapshot ===")
    lines.append(f"  Generated at: {snapshot.generated_at.isoformat(timespec='seconds')}")
    lines.append(f"  Mood:        {mood.mood.value.replace('_', ' ').upper()}")
    lines.append(
        f"  Sentiment:   {mood.sentiment:+.2f}   "
        f"Hype: {mood.hype_velocity:+.1f}% ({describe_hype_velocity(mood.hype_velocity)})"
    )
    lines.append(
        f"  Fear/Greed:  {mood.fear_greed_tilt} ({describe_fear_greed(mood.fear_greed_tilt)})   "
        f"VIX: {mood.vix_level:.1f} ({describe_vix(mood.vix_level)})"
    )
    lines.append(f"  {mood.insight}")
    lines.append("")

    labels = [format_action(a) for a in RecommendationAction] + ["Total"]
    values = [dist.count(a) for a in RecommendationAction] + [dist.total]
    lines.append("  " + "  ".join(labels))
    lines.append("  " + "  ".join(f"{v:>{len(lbl)}}" for lbl, v in zip(labels, values)))
    return "\n".join(lines)


# ── Ticker table ──────────────────────────────────────────────────────────────


def format_ticker_table(tickers: list[EnrichedTicker]) -> str:
    """Format enriched tickers as an ASCII table, highest hybrid score first.

    Columns: ticker, technical, sentiment, hybrid, action, confidence,
    freshness, tagline.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Ticker Signals ===")

    if not tickers:
        lines.append("")
        lines.append("  (no tickers to display)")
        return "\n".join(lines)

    header = (
        f"  {'Ticker':<8}  {'Tech':>5}  {'Sent':>5}  {'Hybrid':>6}  "
        f"{'Action':<11}  {'Conf':>4}  {'Age':<8}  Tagline"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))

    for t in sorted(tickers, key=lambda x: x.hybrid_score, reverse=True):
        rec = t.recommendation
        lines.append(
            f"  {t.ticker:<8}  {t.technical_rating:>5.0f}  {t.sentiment_rating:>5.0f}  "
            f"{t.hybrid_score:>6}  {format_action(rec.action):<11}  "
            f"{rec.confidence:>4}  {format_freshness_tag(t.freshness):<8}  {t.tagline}"
        )
    return "\n".join(lines)


def format_recommendation(ticker: EnrichedTicker) -> str:
    """Detailed block for one ticker: score fusion, action and every reason."""
    rec = ticker.recommendation
    w = ticker.hybrid_weights
    lines = [
        "",
        f"=== {ticker.ticker}" + (f" ({ticker.company_name})" if ticker.company_name else "") + " ===",
        f"  Hybrid score: {ticker.hybrid_score}  "
        f"(technical {ticker.technical_rating:.0f} x {w.technical:.0%} + "
        f"sentiment {ticker.sentiment_rating:.0f} x {w.sentiment:.0%})",
        f"  Action:       {format_action(rec.action)}  (confidence {rec.confidence}%)",
        f"  Signal age:   {format_freshness_tag(ticker.freshness)}",
    ]
    if rec.reasons:
        lines.append("  Reasons:")
        lines.extend(f"    - {reason}" for reason in rec.reasons)
    else:
        lines.append("  Reasons:      (no notable signals)")
    return "\n".join(lines)
