"""Structured logging for the Leaf MCP proxy.

All output goes to stderr. Under the stdio transport stdout carries the MCP
protocol stream, and ``--tools=list`` prints its catalogue there.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Event keys whose values are credentials
SENSITIVE_KEYS = frozenset({"authorization", "api_key", "token", "session_token"})
REDACTED = "***"


def redact_credentials(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask credential values bound to a log event."""
    for key in event_dict.keys() & SENSITIVE_KEYS:
        if event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def _renderer(json_output: bool) -> list[Processor]:
    if json_output:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        log_level: Minimum level name; unknown names fall back to INFO
        json_output: JSON lines (production) instead of console output
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_credentials,
            *_renderer(json_output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # uvicorn, httpx and mcp log through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Logger for ``name``, optionally pre-bound with ``initial_context``."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial_context) if initial_context else logger


def bind_context(**context: Any) -> None:
    """Bind values to every log event of the current call."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
