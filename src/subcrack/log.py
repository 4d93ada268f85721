import logging
import sys
from typing import Literal

import structlog

type LogFormat = Literal["console", "json"]


def _stderr_logger(*args) -> structlog.PrintLogger:
    # Resolve sys.stderr per logger so redirected streams (tests, pipes) are honoured.
    return structlog.PrintLogger(sys.stderr)


def level_for(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int = 0, fmt: LogFormat = "console") -> None:
    """Send structlog output to stderr; stdout only carries results."""
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    elif fmt == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    else:
        raise ValueError(f"Invalid log format: {fmt}")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_for(verbosity)),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
