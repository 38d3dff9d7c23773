"""Autocenter events logging configuration.

Logging goes through structlog. Call `setup_logging()` once per process
(CLI start-up or Cloud Functions cold start); modules obtain loggers with
`get_logger(__name__)` and log key/value events, e.g.
`logger.info("no recipient tokens", category="service", username="maria")`.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Optional

import structlog

LOG_LEVEL_ENV_VAR = "AUTOCENTER_LOG_LEVEL"


def setup_logging(level: Optional[str] = None, *, json_output: Optional[bool] = None) -> None:
    """Configure structlog for the process.

    Args:
        level: Optional override for `AUTOCENTER_LOG_LEVEL` (default INFO).
        json_output: Render JSON lines instead of console output. Defaults to
            JSON when stderr is not a terminal, which is what Cloud Logging ingests.
    """
    if level:
        os.environ[LOG_LEVEL_ENV_VAR] = level
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    if json_output is None:
        json_output = not sys.stderr.isatty()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors.extend([structlog.processors.format_exc_info, structlog.processors.JSONRenderer()])
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)
