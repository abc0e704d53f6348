"""Structured logging with structlog.

Results are written to stdout by the CLI, so every log line goes to stderr.
"""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(level: str = "WARNING", fmt: str = "console") -> None:
    """Configure structlog and stdlib logging.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        fmt: "console" for humans, "json" for CI log collectors
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_testimpact", False):
            root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler._testimpact = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(numeric_level)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if fmt == "json":
        output_processors = [
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ]
    else:
        output_processors = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=shared_processors + output_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger.

    Example:
        logger = get_logger(__name__)
        logger.warning("source_unreadable", path="src/a.ts", reason="decode")
    """
    return structlog.get_logger(name)
