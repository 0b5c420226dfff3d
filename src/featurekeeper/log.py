"""structlog setup for the CLI. Diagnostics go to stderr; stdout carries report text only."""

from __future__ import annotations

import logging
import sys

import structlog

from featurekeeper.config import log_level


def configure_logging(level: str | None = None) -> None:
    name = (level or log_level()).upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
