"""
Structured logging on top of structlog and the stdlib logging module.

Every module logger writes to the stdlib logger of the same name. Until an
application configures logging, stdlib only lets warnings through (on
stderr), so the library stays silent when used from other code. The CLI calls
configure_logging() to render events as console lines or JSON.
"""

import logging
import sys
from typing import Any, TextIO

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """
    Render log events at `level` and above on `stream`.

    Args:
        level: Level name, e.g. DEBUG or WARNING.
        json_output: One JSON object per event instead of console lines.
        stream: Target stream; stderr keeps stdout free for command output.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    stream = stream if stream is not None else sys.stderr

    logging.basicConfig(format="%(message)s", stream=stream, level=log_level, force=True)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Module logger backed by the stdlib logger `name`."""
    return structlog.wrap_logger(logging.getLogger(name))


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Bind key/value pairs to every event logged inside the block.

    Example:
        with log_context(dataset="GV100AD_300421.txt"):
            log.info("Built database")  # carries dataset=...
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
