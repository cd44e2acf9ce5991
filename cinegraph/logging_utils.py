"""Logging configuration helpers."""

from __future__ import annotations

import logging

# Per-tick simulation logging is only useful when explicitly asked for.
_CHATTY_LOGGERS = ("cinegraph.simulation",)


def configure_logging(level: str = "INFO", *, trace_ticks: bool = False) -> None:
    normalized = level.upper()
    resolved = getattr(logging, normalized, logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if not trace_ticks:
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(max(resolved, logging.INFO))
