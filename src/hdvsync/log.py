"""Structured logging setup."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def _stderr_logger(*_args: Any) -> structlog.PrintLogger:
    # Resolve sys.stderr per logger so redirected streams are honored
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: int | str = logging.WARNING, json_output: bool = False) -> None:
    """Configure structlog output on stderr.

    Args:
        level: Minimum level, as a logging constant or a name like "INFO"
        json_output: Render events as JSON lines instead of key=value text
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(**initial_values: Any) -> Any:
    """Return a lazily configured logger, safe to create at import time."""
    return structlog.get_logger(**initial_values)


__all__ = ["configure_logging", "get_logger"]
