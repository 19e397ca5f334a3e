"""Structured logging singleton.

Reads os.environ directly so logging is usable before Settings are loaded
(config validation errors need somewhere to go).

    LOG_LEVEL=DEBUG       verbosity at import; logging.level in config applies later
    LOG_FORMAT=json       one JSON object per line instead of the console renderer
"""

from __future__ import annotations

import logging
import os
import sys

import structlog


def _renderer(json_output: bool) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _setup_logging() -> structlog.stdlib.BoundLogger:
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    json_output = os.environ.get("LOG_FORMAT", "").lower() == "json"

    # stdlib root level drives structlog's filter_by_level
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_output:
        processors.append(structlog.processors.format_exc_info)
    else:
        processors.append(structlog.dev.set_exc_info)
    processors.append(_renderer(json_output))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger("mcpbrowse")


logger = _setup_logging()


def set_level(level_name: str) -> None:
    """Apply ``logging.level`` from config; unknown names fall back to INFO."""
    logging.getLogger().setLevel(getattr(logging, level_name.upper(), logging.INFO))
