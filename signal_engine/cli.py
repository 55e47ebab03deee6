"""
Hybrid Signal Engine — CLI entry point.

A thin shell around the pure scoring functions, for scoring a saved
backend response from the terminal. All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Run the engine.
  5. Report result to stdout (ASCII table, or JSON with ``--json``).

Install and run::

    pip install -e .
    signal-engine --help
    signal-engine validate-config
    signal-engine enrich signals.json
    signal-engine snapshot signals.json --vix 18.5
    signal-engine freshness 1760770800000

Input files hold a JSON array of ticker payloads, or a batch-analysis
response object with a ``"signals"`` array.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="signal-engine",
    help="Hybrid technical + sentiment scoring engine for stock dashboards.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from signal_engine.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from signal_engine.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_tickers_or_exit(input_file: str, config):
    """Read, validate and enrich the tickers in ``input_file``."""
    from pydantic import ValidationError

    from signal_engine.pipeline.enrich import enrich_tickers, parse_ticker_payloads

    path = Path(input_file)
    if not path.exists():
        typer.echo(f"[ERROR] Input file not found: {path}", err=True)
        raise typer.Exit(code=1)

    try:
        with open(path, encoding="utf-8") as f:
            raw: Any = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        typer.echo(f"[ERROR] JSON parse error: {exc}", err=True)
        raise typer.Exit(code=1)

    if isinstance(raw, dict):
        raw = raw.get("signals")
    if not isinstance(raw, list):
        typer.echo(
            "[ERROR] Input must be a JSON array or an object with a 'signals' array.",
            err=True,
        )
        raise typer.Exit(code=1)

    try:
        metrics = parse_ticker_payloads(raw)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid ticker payload:\n{exc}", err=True)
        raise typer.Exit(code=1)

    return enrich_tickers(metrics, config)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print the scoring policy.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)
    t = config.thresholds

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(
        f"  Fusion weights:   technical {config.hybrid.technical_weight} / "
        f"sentiment {config.hybrid.sentiment_weight}"
    )
    typer.echo(
        f"  Action bounds:    strong_buy>={t.strong_buy} buy>={t.buy} "
        f"hold>={t.hold} sell>={t.sell}"
    )
    typer.echo(f"  Confidence base:  {config.confidence.baseline}")
    typer.echo(f"  Default VIX:      {config.mood.default_vix_level}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    weight_sum = config.hybrid.technical_weight + config.hybrid.sentiment_weight
    if abs(weight_sum - 1.0) > 1e-9:
        typer.echo(f"  [WARN] Fusion weights sum to {weight_sum:.3f}, not 1.0.")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("enrich")
def enrich(
    input_file: str = typer.Argument(..., help="JSON file of ticker payloads."),
    as_json: bool = typer.Option(False, "--json", help="Emit enriched records as JSON."),
    detail: bool = typer.Option(False, "--detail", help="Print every reason per ticker."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Score each ticker: hybrid score, action, confidence and reasons."""
    from signal_engine.reporting.formatters import format_recommendation, format_ticker_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    enriched = _load_tickers_or_exit(input_file, config)

    if as_json:
        typer.echo(json.dumps([t.model_dump(mode="json") for t in enriched], indent=2))
        return

    typer.echo(format_ticker_table(enriched))
    if detail:
        for ticker in enriched:
            typer.echo(format_recommendation(ticker))


@app.command("snapshot")
def snapshot(
    input_file: str = typer.Argument(..., help="JSON file of ticker payloads."),
    vix: Optional[float] = typer.Option(
        None,
        "--vix",
        help="Current VIX level (default: config mood.default_vix_level).",
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit the snapshot as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Summarise the portfolio: signal distribution and market mood."""
    from signal_engine.pipeline.enrich import build_portfolio_snapshot
    from signal_engine.reporting.formatters import format_summary_bar

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    enriched = _load_tickers_or_exit(input_file, config)
    result = build_portfolio_snapshot(enriched, vix_level=vix, config=config)

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    typer.echo(format_summary_bar(result))


@app.command("freshness")
def freshness(
    timestamp_ms: int = typer.Argument(..., help="Signal timestamp in epoch milliseconds."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Classify a signal timestamp as new / fresh / recent / stale."""
    from signal_engine.scoring.freshness import format_time_ago, get_signal_freshness

    config = _load_config_or_exit(config_path)

    tier = get_signal_freshness(timestamp_ms, config=config.freshness)
    typer.echo(f"{tier.value} ({format_time_ago(timestamp_ms)})")


if __name__ == "__main__":
    app()
