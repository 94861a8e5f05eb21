"""Structured logging configuration with credential redaction."""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, TextIO

import structlog

from src.fetch.redact import redact_value


LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_log_level(name: str) -> int:
    """Map a level name ('debug', 'info', 'warn', 'error') to a logging level.

    Unknown names fall back to INFO.
    """
    return LOG_LEVELS.get(name.lower(), logging.INFO)


def redact_event(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Structlog processor scrubbing credentials from every event.

    Fields named like a credential (``api_key``, ``token``, ...) are
    replaced with [REDACTED]; credentials embedded in URL-shaped strings
    are scrubbed wherever they appear, including nested values.
    """
    redacted = redact_value(dict(event_dict))
    event_dict.clear()
    event_dict.update(redacted)  # type: ignore[arg-type]
    return event_dict


def build_processors(json_format: bool = True) -> list[structlog.types.Processor]:
    """Build the processor chain used by every logger.

    Redaction runs before rendering so no sink sees a raw credential.

    Args:
        json_format: Whether to render JSON (True) or console output.

    Returns:
        Ordered list of processors.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        redact_event,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    return processors


def configure_logging(
    level: int = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Route structlog and stdlib logging to one redacting sink.

    Logs go to stderr by default: stdout carries the MCP stdio protocol.

    Args:
        level: Minimum level for structlog events.
        output: Sink stream; must not be stdout under the stdio transport.
        json_format: Render JSON lines instead of console text.
    """
    structlog.configure(
        processors=build_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    # Route standard library logging (httpx, fastmcp) to the same stream
    logging.basicConfig(
        format="%(message)s",
        stream=output,
        level=max(level, logging.WARNING),
    )
    # httpx logs full request URLs at INFO, credential included
    logging.getLogger("httpx").setLevel(logging.WARNING)


