"""
Logging setup for the Hybrid Signal Engine.

``configure_logging(config)`` is called once by the CLI before any scoring
work. Library modules only ever use ``logging.getLogger(__name__)``.

Console output goes to stderr; stdout is reserved for the CLI's ``--json``
payloads. With ``json_format = true`` each record is one JSON line::

    {"ts": "2026-01-15T12:00:00Z", "ts_ms": 1768478400000, "level": "INFO",
     "logger": "signal_engine.pipeline.enrich", "msg": "Enriched 4 tickers",
     "ticker_count": 4}

Fields passed through ``extra=`` (``ticker``, ``rule``, ``ticker_count`` ...)
are lifted to the top level of the JSON object.

``trace_rules = true`` lowers only the scoring loggers to DEBUG, so each
confidence rule that fires is logged without flooding the rest of the run.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from signal_engine.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

SCORING_LOGGER = "signal_engine.scoring"

# Attributes present on every LogRecord; anything else came from ``extra=``.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: val
        for key, val in record.__dict__.items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class _JsonFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``ts_ms``, ``level``, ``logger``,
    ``msg``, optional ``exc``, then any ``extra=`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "ts": created.strftime(LOG_DATE_FORMAT),
            "ts_ms": int(record.created * 1000),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        payload.update(_record_extras(record))
        return json.dumps(payload, default=str)


def _build_formatter(config: "LoggingConfig") -> logging.Formatter:
    if config.json_format:
        return _JsonFormatter()
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def _build_handlers(config: "LoggingConfig") -> list[logging.Handler]:
    """stderr handler, plus a file handler when ``log_file`` is set."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    formatter = _build_formatter(config)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(config: "LoggingConfig") -> None:
    """Configure the root logger from a ``LoggingConfig`` instance.

    Args:
        config: Logging configuration section from ``AppConfig``.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    logging.basicConfig(level=level, handlers=_build_handlers(config), force=True)

    scoring = logging.getLogger(SCORING_LOGGER)
    scoring.setLevel(logging.DEBUG if config.trace_rules else logging.NOTSET)
